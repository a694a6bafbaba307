from flask import Blueprint, request, jsonify, current_app

from decorators import login_required, usuario_actual
from servicios.chat.aplicacion.sala_chat import MensajeVacioError


chat_bp = Blueprint("chat_bp", __name__, url_prefix="/api/v1/chat")


def _sala():
    return current_app.extensions["sala_chat"]


def _repositorio_usuarios():
    return current_app.extensions["repositorio_usuario"]


def _texto() -> str:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    return data.get("mensaje") or data.get("message") or ""


# ---------------- Chat grupal -----------------

@chat_bp.get("/mensajes")
@login_required
def historial_chat():
    return jsonify([m.to_dict() for m in _sala().historial()]), 200


@chat_bp.post("/mensajes")
@login_required
def enviar_mensaje():
    try:
        msg = _sala().enviar(usuario_actual(), _texto())
    except MensajeVacioError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(msg.to_dict()), 201


# ---------------- Chat privado -----------------

@chat_bp.get("/privado")
@login_required
def usuarios_chat_privado():
    """Lista de usuarios con los que se puede abrir un chat (todos menos uno mismo)."""
    actual = usuario_actual()
    otros = [u.username for u in _repositorio_usuarios().listar() if u.username != actual]
    return jsonify(otros), 200


@chat_bp.get("/privado/<username>")
@login_required
def conversacion_privada(username: str):
    if not _repositorio_usuarios().existe(username):
        return jsonify({"error": "Usuario no encontrado"}), 404
    mensajes = _sala().conversacion(usuario_actual(), username)
    return jsonify({
        "chatUser": username,
        "mensajes": [m.to_dict() for m in mensajes],
    }), 200


@chat_bp.post("/privado/<username>")
@login_required
def enviar_mensaje_privado(username: str):
    if not _repositorio_usuarios().existe(username):
        return jsonify({"error": "Usuario no encontrado"}), 404
    try:
        msg = _sala().enviar(usuario_actual(), _texto(), destinatario=username)
    except MensajeVacioError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(msg.to_dict()), 201
