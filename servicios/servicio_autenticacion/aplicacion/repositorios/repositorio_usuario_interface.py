# servicios/servicio_autenticacion/aplicacion/repositorios/repositorio_usuario_interface.py

from abc import ABC, abstractmethod
from typing import List, Optional

# Importamos la entidad del Dominio
from servicios.servicio_autenticacion.dominio.usuario import Usuario

# ==============================================================================
# INTERFAZ (Contrato)
# Define el contrato para cualquier adaptador de persistencia de Usuario.
# ==============================================================================
class IRepositorioUsuario(ABC):
    """
    Define los metodos necesarios para gestionar la entidad Usuario.
    La capa de Aplicacion dependera unicamente de esta interfaz (DIP).
    """

    @abstractmethod
    def obtener(self, username: str) -> Optional[Usuario]:
        """Recupera un usuario por su nombre de usuario."""
        pass

    @abstractmethod
    def guardar_usuario(self, usuario: Usuario) -> None:
        """Guarda un nuevo usuario o actualiza uno existente."""
        pass

    @abstractmethod
    def existe(self, username: str) -> bool:
        """Verifica si un nombre de usuario ya esta registrado."""
        pass

    @abstractmethod
    def listar(self) -> List[Usuario]:
        """Retorna todos los usuarios registrados."""
        pass

    @abstractmethod
    def eliminar(self, username: str) -> bool:
        """Elimina un usuario. Retorna False si no existia."""
        pass
