# servicios/servicio_autenticacion/presentacion/rutas.py

from flask import Blueprint, request, jsonify, session, current_app
from passlib.hash import pbkdf2_sha256 as pwd_context

# Importamos las clases de Caso de Uso
from servicios.servicio_autenticacion.aplicacion.casos_uso.registrar_usuario import RegistrarUsuario
from servicios.servicio_autenticacion.aplicacion.casos_uso.iniciar_sesion import IniciarSesion
from servicios.servicio_autenticacion.dominio.excepciones import UsuarioDuplicadoError, CredencialesInvalidasError
from decorators import usuario_actual

# ----------------------------------------------------------------------
# INICIALIZACION Y BLUEPRINT
# ----------------------------------------------------------------------
auth_bp = Blueprint('auth_bp', __name__, url_prefix='/api/v1/auth')


def _repositorio():
    # Repositorio creado en crear_app() (uno por aplicación)
    return current_app.extensions["repositorio_usuario"]


def _datos() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _iniciar_sesion_flask(usuario) -> None:
    session['username'] = usuario.username
    # Si acepto cookies antes de iniciar sesion, se conserva en su perfil
    if session.get('accepted_cookies') and not usuario.acepto_cookies:
        usuario.acepto_cookies = True
        _repositorio().guardar_usuario(usuario)


# ----------------------------------------------------------------------
# RUTAS DE AUTENTICACION
# ----------------------------------------------------------------------
@auth_bp.route('/register', methods=['POST'])
def register():
    """Registra un nuevo usuario y deja la sesión iniciada."""
    data = _datos()
    username = (data.get('user') or data.get('username') or '').strip()
    password = data.get('pass') or data.get('password')

    if not username or not password:
        return jsonify({"error": "Faltan campos requeridos (user, pass)."}), 400

    try:
        usuario = RegistrarUsuario(_repositorio(), pwd_context).ejecutar(username, password)
    except UsuarioDuplicadoError as e:
        session['error'] = e.mensaje
        return jsonify({"error": e.mensaje}), 409

    _iniciar_sesion_flask(usuario)
    session['message'] = "¡Registro exitoso!"
    current_app.logger.info("Usuario %s registrado", usuario.username)
    return jsonify({"mensaje": "¡Registro exitoso!", "user": usuario.to_publico()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _datos()
    username = (data.get('user') or data.get('username') or '').strip()
    password = data.get('pass') or data.get('password')

    if not username or not password:
        return jsonify({"error": "Faltan campos requeridos (user, pass)."}), 400

    try:
        usuario = IniciarSesion(_repositorio(), pwd_context).ejecutar(username, password)
    except CredencialesInvalidasError as e:
        session['error'] = e.mensaje
        return jsonify({"error": e.mensaje}), 401

    _iniciar_sesion_flask(usuario)
    return jsonify({"mensaje": "Inicio de sesion exitoso.", "user": usuario.to_publico()}), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    username = usuario_actual()
    usuario = _repositorio().obtener(username) if username else None
    acepto = bool(usuario.acepto_cookies) if usuario else False
    session.clear()
    # El consentimiento de cookies sobrevive al cierre de sesión si el usuario ya lo dio
    session['accepted_cookies'] = acepto
    return jsonify({"ok": True}), 200


@auth_bp.route('/me', methods=['GET'])
def me():
    """Retorna el estado de autenticación y si hay que mostrar el aviso de cookies."""
    username = usuario_actual()
    usuario = _repositorio().obtener(username) if username else None
    if not usuario:
        return jsonify({
            "authenticated": False,
            "show_cookie_banner": not session.get('accepted_cookies', False),
        }), 200
    return jsonify({
        "authenticated": True,
        "user": usuario.to_publico(),
        "show_cookie_banner": not usuario.acepto_cookies,
    }), 200


@auth_bp.route('/accept-cookies', methods=['POST'])
def accept_cookies():
    session['accepted_cookies'] = True
    username = usuario_actual()
    usuario = _repositorio().obtener(username) if username else None
    if usuario:
        usuario.acepto_cookies = True
        _repositorio().guardar_usuario(usuario)
        current_app.logger.info("Cookies aceptadas para el usuario %s", username)
    return jsonify({"ok": True}), 200


@auth_bp.route('/mensajes', methods=['GET'])
def mensajes_flash():
    """Devuelve (y borra) el último error y mensaje guardados en la sesión."""
    error = session.pop('error', '') or ''
    message = session.pop('message', '') or ''
    return jsonify({"error": error, "message": message}), 200
