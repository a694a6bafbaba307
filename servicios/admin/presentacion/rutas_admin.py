from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from decorators import login_required, admin_required, usuario_actual


admin_bp = Blueprint("admin_bp", __name__, url_prefix="/api/v1/usuarios")


def _repositorio():
    return current_app.extensions["repositorio_usuario"]


@admin_bp.get("")
@login_required
def listar_usuarios():
    actual = usuario_actual()
    data = [
        {"username": u.username, "actual": u.username == actual}
        for u in _repositorio().listar()
    ]
    return jsonify(data), 200


@admin_bp.post("/eliminar")
@admin_required
def eliminar_usuario():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = request.form
    username = (body.get("username") or "").strip()
    if not username:
        return jsonify({"error": "'username' es requerido"}), 400
    if username == usuario_actual():
        return jsonify({"error": "No puedes eliminar tu propio usuario"}), 400

    if not _repositorio().eliminar(username):
        return jsonify({"error": "Usuario no encontrado"}), 404
    current_app.logger.info("Usuario %s eliminado por %s", username, usuario_actual())
    return jsonify({"ok": True}), 200
