# servicios/chat/aplicacion/sala_chat.py

import logging
import threading
from collections import deque
from datetime import datetime
from typing import List, Optional

from servicios.chat.dominio.mensaje import MensajeChat

logger = logging.getLogger(__name__)

EVENTO_CHAT = "chat message"
EVENTO_CHAT_PRIVADO = "chat privado"


class MensajeVacioError(ValueError):
    pass


class SalaChat:
    """
    Relevo de mensajes en memoria para el chat grupal y los chats privados.
    Sin persistencia: el historial es acotado y se pierde al reiniciar.
    """

    def __init__(self, difusor=None, historial_max: int = 200):
        self.difusor = difusor
        self._grupal = deque(maxlen=historial_max)
        self._privados = deque(maxlen=historial_max)
        self._lock = threading.Lock()

    def historial(self) -> List[MensajeChat]:
        with self._lock:
            return list(self._grupal)

    def conversacion(self, a: str, b: str) -> List[MensajeChat]:
        with self._lock:
            return [m for m in self._privados if m.entre(a, b)]

    def enviar(self, username: str, texto: str, destinatario: Optional[str] = None) -> MensajeChat:
        texto = (texto or "").strip()
        if not texto:
            raise MensajeVacioError("El mensaje no puede estar vacío.")

        msg = MensajeChat(username=username, mensaje=texto, timestamp=datetime.now(),
                          destinatario=destinatario)
        with self._lock:
            (self._privados if msg.es_privado else self._grupal).append(msg)

        if self.difusor is not None:
            try:
                if msg.es_privado:
                    self.difusor.publicar(EVENTO_CHAT_PRIVADO, msg.to_dict(),
                                          destinatarios={username, destinatario})
                else:
                    self.difusor.publicar(EVENTO_CHAT, msg.to_dict())
            except Exception:
                logger.exception("No se pudo difundir el mensaje de %s", username)
        return msg
