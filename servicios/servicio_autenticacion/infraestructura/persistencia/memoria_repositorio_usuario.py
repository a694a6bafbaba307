# servicios/servicio_autenticacion/infraestructura/persistencia/memoria_repositorio_usuario.py

import logging
import threading
from typing import Dict, List, Optional

# Contrato de la capa de aplicación
from servicios.servicio_autenticacion.aplicacion.repositorios.repositorio_usuario_interface import IRepositorioUsuario
from servicios.servicio_autenticacion.dominio.usuario import Usuario

logger = logging.getLogger(__name__)


# ==============================================================================
# IMPLEMENTACIÓN DEL REPOSITORIO DE USUARIO (INFRAESTRUCTURA)
# Los usuarios viven solo en memoria: se pierden al reiniciar el proceso.
# ==============================================================================
class MemoriaRepositorioUsuario(IRepositorioUsuario):
    """
    Adaptador que implementa IRepositorioUsuario con un diccionario
    username -> Usuario. Se crea una instancia por aplicación.
    """

    def __init__(self):
        self._usuarios: Dict[str, Usuario] = {}
        self._lock = threading.Lock()

    def obtener(self, username: str) -> Optional[Usuario]:
        with self._lock:
            return self._usuarios.get(username)

    def guardar_usuario(self, usuario: Usuario) -> None:
        """Guarda un nuevo usuario o reemplaza uno existente (UPSERT)."""
        with self._lock:
            self._usuarios[usuario.username] = usuario

    def existe(self, username: str) -> bool:
        with self._lock:
            return username in self._usuarios

    def listar(self) -> List[Usuario]:
        with self._lock:
            return list(self._usuarios.values())

    def eliminar(self, username: str) -> bool:
        with self._lock:
            if username not in self._usuarios:
                return False
            del self._usuarios[username]
        logger.info("Usuario %s eliminado", username)
        return True
