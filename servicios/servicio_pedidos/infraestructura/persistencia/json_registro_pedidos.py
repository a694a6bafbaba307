import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

# Importamos la interfaz de la capa de Aplicación y las excepciones del Dominio
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRegistroPedidos
from servicios.servicio_pedidos.dominio.excepciones import ErrorAlmacenamientoPedidos

logger = logging.getLogger(__name__)


# Adaptador de persistencia que guarda todos los pedidos en un único documento JSON.
# Cada escritura reemplaza el archivo completo usando un temporal + os.replace.
class JsonRegistroPedidos(IRegistroPedidos):

    def __init__(self, ruta: Union[str, Path]):
        """Inicializa el registro con la ruta del archivo de pedidos."""
        self.ruta = Path(ruta)

    def leer(self) -> dict:
        """Lee el documento; si el archivo no existe devuelve un documento vacío."""
        try:
            with open(self.ruta, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("No existe %s; se parte de un registro vacío.", self.ruta)
            return {"siguiente_id": None, "pedidos": []}
        except (OSError, ValueError) as e:
            logger.error("Error al leer %s: %s", self.ruta, e)
            raise ErrorAlmacenamientoPedidos("Error al leer el archivo de pedidos.") from e

        if not isinstance(data, dict) or not isinstance(data.get("pedidos"), list):
            logger.error("Formato inesperado en %s: falta la lista 'pedidos'.", self.ruta)
            raise ErrorAlmacenamientoPedidos("Error al leer el archivo de pedidos.")

        data.setdefault("siguiente_id", None)
        return data

    def escribir(self, documento: dict) -> None:
        """Escribe el documento completo con indentación de 2 espacios."""
        tmp_path = None
        try:
            self.ruta.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".pedidos-", suffix=".tmp", dir=str(self.ruta.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(documento, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.ruta)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error al escribir %s: %s", self.ruta, e)
            raise ErrorAlmacenamientoPedidos("Error al guardar los cambios.") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
