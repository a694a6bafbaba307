# servicios/eventos/difusor.py

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


@dataclass
class Suscripcion:
    """Cola de eventos de un cliente conectado (una pestaña del navegador)."""
    username: Optional[str]
    cola: "queue.Queue" = field(default_factory=lambda: queue.Queue(maxsize=100))

    def siguiente(self, timeout: float = 15.0):
        """Devuelve (evento, datos) o None si no llegó nada en 'timeout' segundos."""
        try:
            return self.cola.get(timeout=timeout)
        except queue.Empty:
            return None


# ==============================================================================
# DIFUSOR DE EVENTOS EN TIEMPO REAL
# Publicación en memoria, sin confirmación ni reintentos: si la cola de un
# suscriptor está llena, el evento se pierde para ese suscriptor.
# ==============================================================================
class DifusorEventos:

    def __init__(self, maxsize: int = 100):
        self.maxsize = maxsize
        self._suscripciones: List[Suscripcion] = []
        self._lock = threading.Lock()

    def suscribir(self, username: Optional[str] = None) -> Suscripcion:
        sus = Suscripcion(username=username, cola=queue.Queue(maxsize=self.maxsize))
        with self._lock:
            self._suscripciones.append(sus)
        logger.debug("Suscripción abierta para %s", username or "anónimo")
        return sus

    def desuscribir(self, sus: Suscripcion) -> None:
        with self._lock:
            if sus in self._suscripciones:
                self._suscripciones.remove(sus)
        logger.debug("Suscripción cerrada para %s", sus.username or "anónimo")

    def publicar(self, evento: str, datos: Any, destinatarios: Optional[Iterable[str]] = None) -> int:
        """
        Envía el evento a todos los suscriptores, o solo a los usuarios de
        'destinatarios' si se indica.

        :returns: cantidad de suscriptores que recibieron el evento.
        """
        audiencia: Optional[Set[str]] = set(destinatarios) if destinatarios is not None else None
        with self._lock:
            suscripciones = list(self._suscripciones)

        entregados = 0
        for sus in suscripciones:
            if audiencia is not None and sus.username not in audiencia:
                continue
            try:
                sus.cola.put_nowait((evento, datos))
                entregados += 1
            except queue.Full:
                logger.debug("Cola llena para %s; evento %s descartado", sus.username, evento)
        return entregados

    @property
    def total_suscripciones(self) -> int:
        with self._lock:
            return len(self._suscripciones)
