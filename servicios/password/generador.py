import logging
import secrets
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class DiccionarioNoDisponibleError(RuntimeError):
    pass


class GeneradorPassword:
    """
    Genera contraseñas concatenando palabras al azar de un diccionario,
    cada una con la primera letra en mayúscula (p.ej. 'CasaPerroLuna').
    """

    def __init__(self, ruta_diccionario):
        self.ruta = Path(ruta_diccionario)
        self._palabras: Optional[List[str]] = None

    def texto_diccionario(self) -> str:
        try:
            return self.ruta.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error al leer el diccionario %s: %s", self.ruta, e)
            raise DiccionarioNoDisponibleError("Error al leer el diccionario") from e

    def palabras(self) -> List[str]:
        if self._palabras is None:
            lineas = [p.strip() for p in self.texto_diccionario().splitlines()]
            palabras = [p for p in lineas if p]
            if not palabras:
                raise DiccionarioNoDisponibleError("El diccionario está vacío")
            self._palabras = palabras
        return self._palabras

    def generar(self, num_palabras: int) -> str:
        palabras = self.palabras()
        elegidas = [secrets.choice(palabras) for _ in range(num_palabras)]
        return "".join(p[0].upper() + p[1:] for p in elegidas)
