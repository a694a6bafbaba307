import json

import pytest

from app import crear_app
from servicios.servicio_pedidos.aplicacion.almacen_pedidos import AlmacenPedidos
from servicios.servicio_pedidos.infraestructura.persistencia.json_registro_pedidos import JsonRegistroPedidos


PEDIDO_INICIAL = {
    "id": 1,
    "cliente": "Juan",
    "fecha": "2024-01-01",
    "estado": "Pendiente",
    "productos": [{"nombre": "Libro", "cantidad": 1, "precio": 10.0}],
    "total": 10.0,
}


class NotificadorFalso:
    def __init__(self):
        self.eventos = []

    def publicar(self, evento, datos, destinatarios=None):
        self.eventos.append((evento, datos))
        return 1


@pytest.fixture
def pedidos_path(tmp_path):
    ruta = tmp_path / "pedidos.json"
    ruta.write_text(json.dumps({"pedidos": [PEDIDO_INICIAL]}, indent=2), encoding="utf-8")
    return ruta


@pytest.fixture
def notificador():
    return NotificadorFalso()


@pytest.fixture
def almacen(pedidos_path, notificador):
    almacen = AlmacenPedidos(JsonRegistroPedidos(pedidos_path), notificador=notificador)
    almacen.hidratar()
    return almacen


@pytest.fixture
def diccionario_path(tmp_path):
    ruta = tmp_path / "diccionario.txt"
    ruta.write_text("casa\nperro\n\nluna\n", encoding="utf-8")
    return ruta


@pytest.fixture
def app(pedidos_path, diccionario_path):
    app = crear_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "PEDIDOS_PATH": str(pedidos_path),
        "DICCIONARIO_PATH": str(diccionario_path),
        "USUARIOS_INICIALES": [("admin", "admin"), ("user", "user")],
        "EVENTOS_PING_SEGUNDOS": 0.05,
        "PASSWORD_MAX_PALABRAS": 5,
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username, password):
    resp = client.post("/api/v1/auth/login", json={"user": username, "pass": password})
    assert resp.status_code == 200
    return client


@pytest.fixture
def cliente_user(app):
    return _login(app.test_client(), "user", "user")


@pytest.fixture
def cliente_admin(app):
    return _login(app.test_client(), "admin", "admin")
