from flask import Blueprint, request, jsonify, current_app, Response

from decorators import login_required
from servicios.password.generador import DiccionarioNoDisponibleError


password_bp = Blueprint("password_bp", __name__, url_prefix="/api/v1/password")


def _generador():
    return current_app.extensions["generador_password"]


@password_bp.get("/diccionario")
@login_required
def diccionario():
    try:
        texto = _generador().texto_diccionario()
    except DiccionarioNoDisponibleError as e:
        return jsonify({"error": str(e)}), 500
    return Response(texto, mimetype="text/plain; charset=utf-8")


@password_bp.get("/generar")
@login_required
def generar_password():
    maximo = int(current_app.config.get("PASSWORD_MAX_PALABRAS", 10))
    try:
        num = int(request.args.get("palabras", "3"))
    except ValueError:
        num = 0
    if num < 1 or num > maximo:
        return jsonify({"error": f"'palabras' debe estar entre 1 y {maximo}"}), 400

    try:
        password = _generador().generar(num)
    except DiccionarioNoDisponibleError as e:
        return jsonify({"error": str(e)}), 500
    return jsonify({"password": password, "palabras": num}), 200
