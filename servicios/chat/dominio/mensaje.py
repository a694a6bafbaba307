from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class MensajeChat:
    username: str
    mensaje: str
    timestamp: datetime
    destinatario: Optional[str] = None

    @property
    def es_privado(self) -> bool:
        return self.destinatario is not None

    def entre(self, a: str, b: str) -> bool:
        """True si el mensaje privado pertenece a la conversación entre a y b."""
        return self.es_privado and {self.username, self.destinatario} == {a, b}

    def to_dict(self) -> dict:
        data = {
            "username": self.username,
            "message": self.mensaje,
            "timestamp": self.timestamp.strftime("%H:%M:%S"),
            "fecha": self.timestamp.isoformat(timespec="seconds"),
        }
        if self.destinatario is not None:
            data["to"] = self.destinatario
        return data
