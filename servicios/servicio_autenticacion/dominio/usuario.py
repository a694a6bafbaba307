# servicios/servicio_autenticacion/dominio/usuario.py

from dataclasses import dataclass

# ==============================================================================
# ENTIDAD DE DOMINIO: USUARIO
# Define la estructura de un usuario de la tienda.
# Es independiente de la tecnologia (Flask, passlib, etc.).
# ==============================================================================
@dataclass
class Usuario:
    """
    Representa un usuario registrado. El nombre de usuario es su identificador.
    """
    username: str

    # Credenciales (la contraseña ya debe estar hasheada al llegar aqui)
    password_hash: str

    # Consentimiento de cookies guardado en el perfil
    acepto_cookies: bool = False

    def to_publico(self) -> dict:
        """Datos que se pueden mostrar en listados (nunca el hash)."""
        return {"username": self.username, "acepto_cookies": self.acepto_cookies}

    def __str__(self):
        return f"Usuario({self.username})"
