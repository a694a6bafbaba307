# servicios/servicio_autenticacion/aplicacion/casos_uso/registrar_usuario.py

from typing import Callable

# Importamos las dependencias
from servicios.servicio_autenticacion.dominio.usuario import Usuario
from servicios.servicio_autenticacion.dominio.excepciones import UsuarioDuplicadoError
from servicios.servicio_autenticacion.aplicacion.repositorios.repositorio_usuario_interface import IRepositorioUsuario

# ==============================================================================
# CASO DE USO: REGISTRAR USUARIO
# Logica de negocio pura para el registro.
# Es independiente de Flask o de donde se guarden los usuarios.
# ==============================================================================
class RegistrarUsuario:
    """
    Caso de Uso responsable de registrar un nuevo usuario en el sistema.
    """
    def __init__(self, repositorio: IRepositorioUsuario, hasher: Callable):
        """
        Inyeccion de Dependencias:
        - repositorio: El contrato (interfaz) para acceder a los usuarios.
        - hasher: objeto con hash()/verify() para contraseñas (passlib).
        """
        self.repositorio = repositorio
        self.hasher = hasher

    def ejecutar(self, username: str, password: str) -> Usuario:
        """
        Ejecuta la logica de registro.

        :raises UsuarioDuplicadoError: Si el nombre de usuario ya existe.
        :returns: La entidad Usuario recien creada.
        """
        username = (username or "").strip()

        # 1. Validacion de Reglas de Negocio
        if self.repositorio.existe(username):
            raise UsuarioDuplicadoError()

        # 2. Hashing de la Contraseña
        password_hash = self.hasher.hash(password)

        # 3. Creacion y persistencia de la Entidad
        nuevo_usuario = Usuario(username=username, password_hash=password_hash)
        self.repositorio.guardar_usuario(nuevo_usuario)

        return nuevo_usuario
