# servicios/servicio_pedidos/dominio/pedido.py

import math
import re
import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from servicios.servicio_pedidos.dominio.excepciones import DatosDePedidoInvalidosError

_ENTERO = re.compile(r"\s*([+-]?\d+)")
_DECIMAL = re.compile(r"\s*([+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?)")


# ==============================================================================
# ESTADO DEL PEDIDO
# Conjunto cerrado de estados aceptados.
# ==============================================================================
class EstadoPedido(enum.Enum):
    PENDIENTE = "Pendiente"
    PROCESANDO = "Procesando"
    ENVIADO = "Enviado"
    ENTREGADO = "Entregado"
    CANCELADO = "Cancelado"

    @classmethod
    def desde_texto(cls, valor: Any) -> "EstadoPedido":
        """
        Acepta el valor en español o su equivalente en inglés, sin distinguir
        mayúsculas. La entrada se normaliza: "Pending" se guarda y se devuelve
        como "Pendiente".
        """
        if isinstance(valor, cls):
            return valor
        texto = str(valor or "").strip().lower()
        estado = _ALIAS_ESTADOS.get(texto)
        if estado is None:
            permitidos = ", ".join(e.value for e in cls)
            raise DatosDePedidoInvalidosError(f"Estado inválido. Valores permitidos: {permitidos}.")
        return estado


_ALIAS_ESTADOS = {e.value.lower(): e for e in EstadoPedido}
_ALIAS_ESTADOS.update({
    "pending": EstadoPedido.PENDIENTE,
    "processing": EstadoPedido.PROCESANDO,
    "shipped": EstadoPedido.ENVIADO,
    "delivered": EstadoPedido.ENTREGADO,
    "cancelled": EstadoPedido.CANCELADO,
    "canceled": EstadoPedido.CANCELADO,
})


def parsear_fecha(valor: Any) -> date:
    if isinstance(valor, date):
        return valor
    try:
        return date.fromisoformat(str(valor or "").strip())
    except ValueError:
        raise DatosDePedidoInvalidosError("Fecha inválida. Use el formato AAAA-MM-DD.")


def parsear_cantidad(valor: Any) -> int:
    """Lee el entero inicial del texto; 0 si no hay ninguno."""
    m = _ENTERO.match(str(valor if valor is not None else ""))
    return int(m.group(1)) if m else 0


def parsear_precio(valor: Any) -> Decimal:
    """Lee el decimal inicial del texto; 0 si no hay ninguno."""
    m = _DECIMAL.match(str(valor if valor is not None else ""))
    if not m:
        return Decimal("0")
    try:
        return Decimal(m.group(1))
    except InvalidOperation:
        return Decimal("0")


# ==============================================================================
# ENTIDAD LINEA DE PEDIDO
# ==============================================================================
@dataclass
class LineaPedido:
    """Un producto dentro del pedido: nombre, cantidad y precio unitario."""
    nombre: str
    cantidad: int
    precio: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.precio * self.cantidad

    def to_dict(self) -> dict:
        return {
            'nombre': self.nombre,
            'cantidad': self.cantidad,
            'precio': float(self.precio),
        }


def agrupar_productos(campos: Optional[Iterable[Any]]) -> List[LineaPedido]:
    """
    Convierte la secuencia plana [nombre, cantidad, precio, nombre, ...] en lineas.

    Las ternas con cantidad o precio menores o iguales a 0 se descartan.

    :raises DatosDePedidoInvalidosError: si la longitud no es múltiplo de 3 o
        si ninguna terna sobrevive al filtrado, o si el total no cabe en un
        número JSON finito.
    """
    campos = list(campos or [])
    if not campos or len(campos) % 3 != 0:
        raise DatosDePedidoInvalidosError()

    lineas = []
    for i in range(0, len(campos), 3):
        nombre = campos[i]
        cantidad = parsear_cantidad(campos[i + 1])
        precio = parsear_precio(campos[i + 2])
        if cantidad > 0 and precio > 0:
            lineas.append(LineaPedido(nombre=str(nombre if nombre is not None else ""),
                                      cantidad=cantidad, precio=precio))

    if not lineas:
        raise DatosDePedidoInvalidosError()

    # Los importes se guardan como números JSON: deben caber en un float finito
    try:
        total = sum((l.subtotal for l in lineas), Decimal("0"))
        representable = math.isfinite(float(total))
    except ArithmeticError:
        representable = False
    if not representable:
        raise DatosDePedidoInvalidosError("Precio o cantidad fuera de rango.")
    return lineas


# ==============================================================================
# ENTIDAD PEDIDO
# ==============================================================================
@dataclass
class Pedido:
    """
    Representa un pedido de un cliente.
    El total no se guarda como dato propio: siempre se recalcula desde los productos.
    """
    id: int
    cliente: str
    fecha: date
    estado: EstadoPedido
    productos: List[LineaPedido] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((p.subtotal for p in self.productos), Decimal("0"))

    @classmethod
    def crear_nuevo(cls, id_pedido: int, cliente: Any, fecha: Any, estado: Any,
                    productos: List[LineaPedido]) -> "Pedido":
        """Metodo factory que valida los campos de cabecera del pedido."""
        cliente = str(cliente or "").strip()
        if not cliente:
            raise DatosDePedidoInvalidosError("El cliente es obligatorio.")
        if not productos:
            raise DatosDePedidoInvalidosError()
        return cls(
            id=int(id_pedido),
            cliente=cliente,
            fecha=parsear_fecha(fecha),
            estado=EstadoPedido.desde_texto(estado),
            productos=list(productos),
        )

    @classmethod
    def desde_dict(cls, data: dict) -> "Pedido":
        """Reconstruye un pedido leído del archivo JSON."""
        productos = [
            LineaPedido(
                nombre=str(p['nombre']),
                cantidad=int(p['cantidad']),
                precio=Decimal(str(p['precio'])),
            )
            for p in data.get('productos') or []
        ]
        return cls(
            id=int(data['id']),
            cliente=str(data['cliente']),
            fecha=parsear_fecha(data['fecha']),
            estado=EstadoPedido.desde_texto(data['estado']),
            productos=productos,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'cliente': self.cliente,
            'fecha': self.fecha.isoformat(),
            'estado': self.estado.value,
            'productos': [p.to_dict() for p in self.productos],
            'total': float(self.total),
        }

    def to_evento(self) -> dict:
        """Campos públicos que se difunden al crear el pedido."""
        data = self.to_dict()
        data.pop('total')
        return data
