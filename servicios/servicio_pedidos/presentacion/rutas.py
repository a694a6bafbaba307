from flask import Blueprint, request, jsonify, session, current_app

from decorators import login_required
from servicios.servicio_pedidos.dominio.pedido import EstadoPedido
from servicios.servicio_pedidos.dominio.excepciones import (
    PedidoNoEncontradoError,
    DatosDePedidoInvalidosError,
    ErrorAlmacenamientoPedidos,
)

# Crear el Blueprint de Pedidos
pedidos_bp = Blueprint('pedidos_bp', __name__, url_prefix='/api/v1/pedidos')


def _almacen():
    # El almacén se crea en crear_app() y se inyecta a través de app.extensions
    return current_app.extensions["almacen_pedidos"]


def _datos_formulario() -> dict:
    """Acepta JSON o formulario; en formulario 'productos' llega como lista repetida."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    form = request.form
    productos = form.getlist('productos') or form.getlist('productos[]')
    return {
        'cliente': form.get('cliente'),
        'fecha': form.get('fecha'),
        'estado': form.get('estado'),
        'productos': productos,
    }


@pedidos_bp.route('', methods=['GET'])
@login_required
def listar_pedidos():
    return jsonify([p.to_dict() for p in _almacen().listar()]), 200


@pedidos_bp.route('/estados', methods=['GET'])
@login_required
def listar_estados():
    return jsonify([e.value for e in EstadoPedido]), 200


@pedidos_bp.route('', methods=['POST'])
@login_required
def agregar_pedido():
    """
    Crea un pedido. 'productos' es una lista plana: nombre, cantidad, precio, nombre, ...
    """
    data = _datos_formulario()
    productos = data.get('productos')
    if productos is not None and not isinstance(productos, list):
        productos = [productos]

    current_app.logger.debug("Productos recibidos: %r", productos)
    try:
        pedido = _almacen().crear(
            cliente=data.get('cliente'),
            fecha=data.get('fecha'),
            estado=data.get('estado'),
            campos_productos=productos,
        )
    except DatosDePedidoInvalidosError as e:
        session['error'] = e.mensaje
        return jsonify({"error": e.mensaje}), 400
    except ErrorAlmacenamientoPedidos as e:
        return jsonify({"error": e.mensaje}), 500

    return jsonify(pedido.to_dict()), 201


@pedidos_bp.route('/<id_pedido>', methods=['GET'])
@login_required
def obtener_pedido(id_pedido: str):
    try:
        pedido = _almacen().obtener(id_pedido)
    except PedidoNoEncontradoError as e:
        return jsonify({"error": e.mensaje}), 404
    return jsonify(pedido.to_dict()), 200


@pedidos_bp.route('/<id_pedido>', methods=['PUT', 'PATCH'])
@login_required
def actualizar_pedido(id_pedido: str):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    estado = data.get('estado')
    if not estado:
        return jsonify({"error": "Falta el campo 'estado'."}), 400

    try:
        pedido = _almacen().actualizar_estado(id_pedido, estado)
    except PedidoNoEncontradoError as e:
        return jsonify({"error": e.mensaje}), 404
    except DatosDePedidoInvalidosError as e:
        return jsonify({"error": e.mensaje}), 400
    except ErrorAlmacenamientoPedidos as e:
        return jsonify({"error": e.mensaje}), 500

    return jsonify(pedido.to_dict()), 200


@pedidos_bp.route('/<id_pedido>', methods=['DELETE'])
@login_required
def eliminar_pedido(id_pedido: str):
    try:
        pedido = _almacen().eliminar(id_pedido)
    except PedidoNoEncontradoError as e:
        return jsonify({"error": e.mensaje}), 404
    return jsonify({"ok": True, "id": pedido.id}), 200
