# servicios/servicio_autenticacion/aplicacion/casos_uso/iniciar_sesion.py

from typing import Callable
from servicios.servicio_autenticacion.dominio.usuario import Usuario
from servicios.servicio_autenticacion.dominio.excepciones import CredencialesInvalidasError
from servicios.servicio_autenticacion.aplicacion.repositorios.repositorio_usuario_interface import IRepositorioUsuario

# ==============================================================================
# CASO DE USO: INICIAR SESION
# Logica de negocio para verificar credenciales.
# ==============================================================================
class IniciarSesion:
    """
    Caso de Uso responsable de autenticar a un usuario con su nombre y password.
    """
    def __init__(self, repositorio: IRepositorioUsuario, hasher: Callable):
        self.repositorio = repositorio
        self.hasher = hasher

    def ejecutar(self, username: str, password: str) -> Usuario:
        """
        Busca el usuario y verifica la contraseña.

        :raises CredencialesInvalidasError: Si el usuario no existe o la contraseña es incorrecta.
        :returns: La entidad Usuario autenticada.
        """
        usuario = self.repositorio.obtener((username or "").strip())

        # Mismo error en ambos casos para no revelar que usuarios existen
        if not usuario:
            raise CredencialesInvalidasError()

        if not self.hasher.verify(password or "", usuario.password_hash):
            raise CredencialesInvalidasError()

        return usuario
