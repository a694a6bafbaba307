from functools import wraps
from flask import jsonify, session, current_app


def usuario_actual() -> str | None:
    return session.get("username")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not usuario_actual():
            session["error"] = "Unauthorized access"
            return jsonify({"error": "Unauthorized access"}), 401
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        username = usuario_actual()
        if not username:
            return jsonify({"error": "Unauthorized access"}), 401
        if username != current_app.config.get("ADMIN_USERNAME", "admin"):
            return jsonify({"error": "Acceso prohibido"}), 403
        return fn(*args, **kwargs)
    return wrapper
