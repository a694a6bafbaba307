# app.py
from flask import Flask, jsonify, current_app
from flask_cors import CORS
from passlib.hash import pbkdf2_sha256 as pwd_context
import logging
from werkzeug.exceptions import HTTPException

from configuracion import Config
from servicios.eventos.difusor import DifusorEventos
from servicios.eventos.presentacion.rutas_eventos import eventos_bp
from servicios.servicio_pedidos.aplicacion.almacen_pedidos import AlmacenPedidos
from servicios.servicio_pedidos.infraestructura.persistencia.json_registro_pedidos import JsonRegistroPedidos
from servicios.servicio_pedidos.presentacion.rutas import pedidos_bp
from servicios.servicio_autenticacion.aplicacion.casos_uso.registrar_usuario import RegistrarUsuario
from servicios.servicio_autenticacion.dominio.excepciones import UsuarioDuplicadoError
from servicios.servicio_autenticacion.infraestructura.persistencia.memoria_repositorio_usuario import MemoriaRepositorioUsuario
from servicios.servicio_autenticacion.presentacion.rutas import auth_bp
from servicios.admin.presentacion.rutas_admin import admin_bp
from servicios.chat.aplicacion.sala_chat import SalaChat
from servicios.chat.presentacion.rutas_chat import chat_bp
from servicios.password.generador import GeneradorPassword
from servicios.password.presentacion.rutas_password import password_bp


def _configurar_logging(app: Flask) -> None:
    log_level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    # Los módulos de servicios/ registran con logging.getLogger(__name__)
    raiz = logging.getLogger("servicios")
    formato = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    for logger in (app.logger, raiz):
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(formato)
            logger.addHandler(handler)
    app.logger.setLevel(getattr(logging, log_level, logging.INFO))
    raiz.setLevel(getattr(logging, log_level, logging.INFO))


def _registrar_usuarios_iniciales(app: Flask, repositorio) -> None:
    registrar = RegistrarUsuario(repositorio=repositorio, hasher=pwd_context)
    for username, password in app.config.get("USUARIOS_INICIALES") or []:
        try:
            registrar.ejecutar(username, password)
            app.logger.info("User %s successfully registered", username)
        except UsuarioDuplicadoError:
            app.logger.warning("Usuario inicial %s repetido; se ignora", username)


def crear_app(config_extra: dict | None = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_extra:
        app.config.update(config_extra)

    # Si necesitas probar desde un dominio distinto, define CORS_ORIGINS
    # como lista separada por comas: "https://mi-frontend.com,https://otro.com"
    cors_env = app.config.get("CORS_ORIGINS", "*")
    allowed = [o.strip() for o in cors_env.split(",") if o.strip()] if cors_env and cors_env != "*" else "*"
    CORS(app, resources={r"/api/*": {"origins": allowed}}, supports_credentials=True)

    _configurar_logging(app)
    # Permite acceder con y sin "/" al final sin redirigir
    app.url_map.strict_slashes = False

    # ---- Dependencias (una instancia por aplicación) ----
    difusor = DifusorEventos()
    repositorio_usuario = MemoriaRepositorioUsuario()
    almacen = AlmacenPedidos(
        registro=JsonRegistroPedidos(app.config["PEDIDOS_PATH"]),
        notificador=difusor,
    )
    app.extensions["difusor_eventos"] = difusor
    app.extensions["repositorio_usuario"] = repositorio_usuario
    app.extensions["almacen_pedidos"] = almacen
    app.extensions["sala_chat"] = SalaChat(difusor=difusor, historial_max=int(app.config["CHAT_HISTORIAL_MAX"]))
    app.extensions["generador_password"] = GeneradorPassword(app.config["DICCIONARIO_PATH"])

    _registrar_usuarios_iniciales(app, repositorio_usuario)
    # Los pedidos se cargan antes de aceptar peticiones
    almacen.hidratar()

    # Blueprints
    app.register_blueprint(auth_bp)      # /api/v1/auth/*
    app.register_blueprint(pedidos_bp)   # /api/v1/pedidos/*
    app.register_blueprint(admin_bp)     # /api/v1/usuarios/*
    app.register_blueprint(chat_bp)      # /api/v1/chat/*
    app.register_blueprint(password_bp)  # /api/v1/password/*
    app.register_blueprint(eventos_bp)   # /api/v1/eventos

    @app.get("/api/v1/health")
    def health():
        return jsonify({"ok": True, "hidratado": almacen.hidratado, "pedidos": len(almacen.listar())}), 200

    @app.errorhandler(404)
    def pagina_no_encontrada(_error):
        return jsonify({"error": "Ruta no encontrada"}), 404

    @app.errorhandler(405)
    def metodo_no_permitido(_error):
        return jsonify({"error": "Método no permitido"}), 405

    @app.errorhandler(Exception)
    def _unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        current_app.logger.exception("Unhandled")
        return {"ok": False, "error": "server_error"}, 500

    return app

create_app = crear_app

if __name__ == "__main__":
    app = crear_app()
    print("Iniciando servidor Flask. Accede a http://127.0.0.1:5000/")
    app.run(debug=True, threaded=True)
