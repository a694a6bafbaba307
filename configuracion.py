# configuracion.py
import os
from pathlib import Path

try:
    # Cargar variables de entorno si existe .env (opcional)
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv())
except Exception:
    pass


def _lista_usuarios(valor: str) -> list[tuple[str, str]]:
    """Convierte 'admin:admin,user:user' en [('admin', 'admin'), ('user', 'user')]."""
    pares = []
    for item in valor.split(","):
        item = item.strip()
        if not item or ":" not in item:
            continue
        username, password = item.split(":", 1)
        if username.strip():
            pares.append((username.strip(), password))
    return pares


class Config:
    """
    Configuración global de la aplicación Flask.
    Los pedidos se guardan en 'data/pedidos.json' dentro del proyecto.
    """

    BASE_DIR = Path(__file__).resolve().parent
    DATA_DIR = BASE_DIR / "data"

    # -------------------- Seguridad / Sesiones --------------------
    SECRET_KEY = os.getenv("SECRET_KEY", "clave-secreta-para-prototipo")
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "False").lower() == "true"
    JSON_AS_ASCII = False

    # -------------------- Pedidos --------------------
    PEDIDOS_PATH = os.getenv("PEDIDOS_PATH", str(DATA_DIR / "pedidos.json"))

    # -------------------- Generador de contraseñas --------------------
    DICCIONARIO_PATH = os.getenv("DICCIONARIO_PATH", str(DATA_DIR / "diccionario.txt"))
    PASSWORD_MAX_PALABRAS = int(os.getenv("PASSWORD_MAX_PALABRAS", "10"))

    # -------------------- Chat --------------------
    CHAT_HISTORIAL_MAX = int(os.getenv("CHAT_HISTORIAL_MAX", "200"))

    # -------------------- Eventos en tiempo real (SSE) --------------------
    # Cada cuántos segundos se envía un comentario de keep-alive al navegador
    EVENTOS_PING_SEGUNDOS = float(os.getenv("EVENTOS_PING_SEGUNDOS", "15"))

    # -------------------- Usuarios --------------------
    # El usuario administrador es el único que puede borrar usuarios
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin").strip()
    # Usuarios registrados al arrancar (usuario:password separados por coma)
    USUARIOS_INICIALES = _lista_usuarios(os.getenv("USUARIOS_INICIALES", "admin:admin,user:user"))

    # -------------------- Logging / CORS --------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
