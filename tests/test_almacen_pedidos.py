import json
from decimal import Decimal

import pytest

from servicios.servicio_pedidos.aplicacion.almacen_pedidos import AlmacenPedidos, EVENTO_NUEVO_PEDIDO
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRegistroPedidos
from servicios.servicio_pedidos.dominio.excepciones import (
    DatosDePedidoInvalidosError,
    ErrorAlmacenamientoPedidos,
    PedidoNoEncontradoError,
)
from servicios.servicio_pedidos.dominio.pedido import EstadoPedido
from servicios.servicio_pedidos.infraestructura.persistencia.json_registro_pedidos import JsonRegistroPedidos


class RegistroConFallos(IRegistroPedidos):
    """Envuelve un registro real y permite forzar errores de lectura o escritura."""

    def __init__(self, real):
        self.real = real
        self.fallar_lectura = False
        self.fallar_escritura = False

    def leer(self):
        if self.fallar_lectura:
            raise ErrorAlmacenamientoPedidos("Error al leer el archivo de pedidos.")
        return self.real.leer()

    def escribir(self, documento):
        if self.fallar_escritura:
            raise ErrorAlmacenamientoPedidos()
        self.real.escribir(documento)


def _leer_log(ruta):
    return json.loads(ruta.read_text(encoding="utf-8"))


def test_hidratar_carga_el_indice(almacen):
    assert [p.id for p in almacen.listar()] == [1]
    assert almacen.hidratado


def test_crear_pedido_escenario_basico(almacen, pedidos_path, notificador):
    pedido = almacen.crear("Ana", "2024-01-01", "Pending", ["Widget", "3", "2.50"])

    assert pedido.id == 2
    assert len(pedido.productos) == 1
    linea = pedido.productos[0]
    assert (linea.nombre, linea.cantidad, linea.precio) == ("Widget", 3, Decimal("2.50"))
    assert pedido.total == Decimal("7.50")

    log = _leer_log(pedidos_path)
    assert [p["id"] for p in log["pedidos"]] == [1, 2]
    assert log["pedidos"][1]["total"] == 7.5
    assert log["siguiente_id"] == 3

    assert notificador.eventos == [(EVENTO_NUEVO_PEDIDO, {
        "id": 2,
        "cliente": "Ana",
        "fecha": "2024-01-01",
        "estado": "Pendiente",
        "productos": [{"nombre": "Widget", "cantidad": 3, "precio": 2.5}],
    })]


def test_crear_descarta_lineas_con_cantidad_cero(almacen):
    pedido = almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "0", "5.00", "B", "2", "3.00"])

    assert [(l.nombre, l.cantidad, l.precio) for l in pedido.productos] == [("B", 2, Decimal("3.00"))]
    assert pedido.total == Decimal("6.00")


def test_obtener_tras_crear_devuelve_los_datos_enviados(almacen):
    creado = almacen.crear("Ana", "2024-03-05", "Procesando", ["Mesa", "1", "99.90", "Silla", "4", "25"])

    pedido = almacen.obtener(str(creado.id))

    assert pedido.cliente == "Ana"
    assert pedido.fecha.isoformat() == "2024-03-05"
    assert pedido.estado is EstadoPedido.PROCESANDO
    assert [(l.nombre, l.cantidad, l.precio) for l in pedido.productos] == [
        ("Mesa", 1, Decimal("99.90")),
        ("Silla", 4, Decimal("25")),
    ]
    assert pedido.total == Decimal("199.90")


@pytest.mark.parametrize(
    "campos",
    [
        ["Widget", "3"],
        ["Widget", "3", "2.50", "Suelto"],
        ["A", "0", "5", "B", "2", "-1"],
        [],
    ],
)
def test_crear_invalido_no_modifica_indice_ni_log(almacen, pedidos_path, notificador, campos):
    antes = pedidos_path.read_bytes()

    with pytest.raises(DatosDePedidoInvalidosError):
        almacen.crear("Ana", "2024-01-01", "Pendiente", campos)

    assert [p.id for p in almacen.listar()] == [1]
    assert pedidos_path.read_bytes() == antes
    assert notificador.eventos == []


def test_el_total_guardado_coincide_con_los_productos_guardados(almacen, pedidos_path):
    pedido = almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "3", "0.333"])

    guardado = _leer_log(pedidos_path)["pedidos"][-1]
    recalculado = sum(
        (Decimal(str(p["precio"])) * p["cantidad"] for p in guardado["productos"]), Decimal("0")
    )
    assert pedido.total == Decimal("0.999")
    assert Decimal(str(guardado["total"])) == recalculado == Decimal("0.999")


def test_estado_en_ingles_se_guarda_normalizado(almacen, pedidos_path):
    pedido = almacen.crear("Ana", "2024-01-01", "Pending", ["A", "1", "1"])

    assert almacen.obtener(pedido.id).estado is EstadoPedido.PENDIENTE
    assert _leer_log(pedidos_path)["pedidos"][-1]["estado"] == "Pendiente"


def test_crear_con_precio_fuera_de_rango_no_toca_el_indice_ni_el_log(almacen, pedidos_path):
    antes = pedidos_path.read_text(encoding="utf-8")

    with pytest.raises(DatosDePedidoInvalidosError) as exc:
        almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "2", "1e999999"])

    assert exc.value.mensaje == "Precio o cantidad fuera de rango."
    assert [p.id for p in almacen.listar()] == [1]
    assert pedidos_path.read_text(encoding="utf-8") == antes


def test_crear_con_fallo_de_escritura_no_toca_el_indice(pedidos_path, notificador):
    registro = RegistroConFallos(JsonRegistroPedidos(pedidos_path))
    almacen = AlmacenPedidos(registro, notificador=notificador)
    almacen.hidratar()
    registro.fallar_escritura = True

    with pytest.raises(ErrorAlmacenamientoPedidos):
        almacen.crear("Ana", "2024-01-01", "Pendiente", ["Widget", "1", "1"])

    assert [p.id for p in almacen.listar()] == [1]
    assert notificador.eventos == []


def test_ids_monotonos_tras_eliminar_y_reiniciar(almacen, pedidos_path):
    segundo = almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "1", "1"])
    almacen.eliminar(segundo.id)
    tercero = almacen.crear("Ana", "2024-01-02", "Pendiente", ["B", "1", "1"])
    assert tercero.id == segundo.id + 1

    reiniciado = AlmacenPedidos(JsonRegistroPedidos(pedidos_path))
    reiniciado.hidratar()
    cuarto = reiniciado.crear("Ana", "2024-01-03", "Pendiente", ["C", "1", "1"])
    assert cuarto.id == tercero.id + 1


def test_log_sin_contador_usa_maximo_mas_uno(tmp_path):
    ruta = tmp_path / "pedidos.json"
    ruta.write_text(json.dumps({"pedidos": [
        {"id": 7, "cliente": "X", "fecha": "2024-01-01", "estado": "Pendiente",
         "productos": [{"nombre": "A", "cantidad": 1, "precio": 1}], "total": 1},
    ]}), encoding="utf-8")
    almacen = AlmacenPedidos(JsonRegistroPedidos(ruta))
    almacen.hidratar()

    assert almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "1", "1"]).id == 8


def test_actualizar_estado_persiste(almacen, pedidos_path):
    pedido = almacen.actualizar_estado("1", "Shipped")

    assert pedido.estado is EstadoPedido.ENVIADO
    assert almacen.obtener(1).estado is EstadoPedido.ENVIADO
    assert _leer_log(pedidos_path)["pedidos"][0]["estado"] == "Enviado"


def test_actualizar_estado_inexistente(almacen, pedidos_path):
    antes = pedidos_path.read_bytes()

    with pytest.raises(PedidoNoEncontradoError):
        almacen.actualizar_estado(99, "Enviado")

    assert [p.id for p in almacen.listar()] == [1]
    assert almacen.obtener(1).estado is EstadoPedido.PENDIENTE
    assert pedidos_path.read_bytes() == antes


def test_actualizar_estado_invalido(almacen, pedidos_path):
    antes = pedidos_path.read_bytes()

    with pytest.raises(DatosDePedidoInvalidosError):
        almacen.actualizar_estado(1, "Perdido")

    assert pedidos_path.read_bytes() == antes


def test_actualizar_estado_con_fallo_de_almacenamiento_no_toca_el_indice(pedidos_path):
    registro = RegistroConFallos(JsonRegistroPedidos(pedidos_path))
    almacen = AlmacenPedidos(registro)
    almacen.hidratar()

    registro.fallar_escritura = True
    with pytest.raises(ErrorAlmacenamientoPedidos):
        almacen.actualizar_estado(1, "Entregado")
    assert almacen.obtener(1).estado is EstadoPedido.PENDIENTE

    registro.fallar_escritura = False
    registro.fallar_lectura = True
    with pytest.raises(ErrorAlmacenamientoPedidos):
        almacen.actualizar_estado(1, "Entregado")
    assert almacen.obtener(1).estado is EstadoPedido.PENDIENTE


def test_eliminar_solo_afecta_al_indice_y_el_pedido_reaparece_al_hidratar(almacen, pedidos_path):
    # La eliminación no se escribe en el registro: al reiniciar el pedido vuelve
    almacen.eliminar("1")
    with pytest.raises(PedidoNoEncontradoError):
        almacen.obtener(1)
    assert [p["id"] for p in _leer_log(pedidos_path)["pedidos"]] == [1]

    almacen.hidratar()
    assert almacen.obtener(1).cliente == "Juan"


def test_eliminar_inexistente(almacen):
    with pytest.raises(PedidoNoEncontradoError):
        almacen.eliminar(42)
    with pytest.raises(PedidoNoEncontradoError):
        almacen.obtener("no-es-un-id")


def test_actualizar_pedido_eliminado_es_no_encontrado(almacen):
    almacen.eliminar(1)
    with pytest.raises(PedidoNoEncontradoError):
        almacen.actualizar_estado(1, "Enviado")


def test_hidratar_con_archivo_corrupto_deja_el_indice_vacio(tmp_path, caplog):
    ruta = tmp_path / "pedidos.json"
    ruta.write_text("{ no es json", encoding="utf-8")
    almacen = AlmacenPedidos(JsonRegistroPedidos(ruta))

    assert almacen.hidratar() == 0
    assert almacen.listar() == []
    assert "No se pudieron cargar los pedidos" in caplog.text


def test_hidratar_sin_archivo_y_crear_el_primero(tmp_path):
    ruta = tmp_path / "sub" / "pedidos.json"
    almacen = AlmacenPedidos(JsonRegistroPedidos(ruta))

    assert almacen.hidratar() == 0
    assert almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "2", "1.5"]).id == 1
    assert _leer_log(ruta)["siguiente_id"] == 2


def test_hidratar_ignora_registros_invalidos(tmp_path):
    ruta = tmp_path / "pedidos.json"
    ruta.write_text(json.dumps({"pedidos": [
        {"id": 1, "cliente": "X", "fecha": "2024-01-01", "estado": "Pendiente", "productos": []},
        {"id": 2, "cliente": "Y", "fecha": "mañana", "estado": "Pendiente", "productos": []},
    ]}), encoding="utf-8")
    almacen = AlmacenPedidos(JsonRegistroPedidos(ruta))

    assert almacen.hidratar() == 1
    assert [p.id for p in almacen.listar()] == [1]


def test_fallo_del_notificador_no_afecta_al_pedido(almacen):
    class NotificadorRoto:
        def publicar(self, evento, datos):
            raise RuntimeError("sin conexión")

    almacen.notificador = NotificadorRoto()
    pedido = almacen.crear("Ana", "2024-01-01", "Pendiente", ["A", "1", "1"])

    assert almacen.obtener(pedido.id) == pedido
