# servicios/servicio_pedidos/aplicacion/almacen_pedidos.py

import dataclasses
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from servicios.servicio_pedidos.dominio.pedido import EstadoPedido, Pedido, agrupar_productos
from servicios.servicio_pedidos.dominio.excepciones import PedidoNoEncontradoError, ErrorAlmacenamientoPedidos
from servicios.servicio_pedidos.aplicacion.repositorios.repositorio_pedido_interface import IRegistroPedidos

logger = logging.getLogger(__name__)

EVENTO_NUEVO_PEDIDO = "nuevoPedido"
EVENTO_PEDIDO_ACTUALIZADO = "pedidoActualizado"
EVENTO_PEDIDO_ELIMINADO = "pedidoEliminado"


# ==============================================================================
# ALMACEN DE PEDIDOS
# Índice en memoria (id -> Pedido) sincronizado con el registro durable.
# La escritura del registro es el punto de confirmación: el índice solo se
# modifica después de que el archivo se escribió correctamente.
# ==============================================================================
class AlmacenPedidos:
    """
    Dueño del agregado Pedido. Se crea una vez al arrancar la aplicación y se
    inyecta en las rutas (nunca se accede como variable global del módulo).
    """
    def __init__(self, registro: IRegistroPedidos, notificador=None):
        """
        Inyeccion de Dependencias:
        - registro: el contrato del documento durable de pedidos.
        - notificador: objeto con publicar(evento, datos) para avisos en tiempo real (opcional).
        """
        self.registro = registro
        self.notificador = notificador
        self._indice: Dict[int, Pedido] = {}
        self._lock = threading.RLock()
        self.hidratado = False

    # --------------------------------------------------------------------------
    # Arranque
    # --------------------------------------------------------------------------
    def hidratar(self) -> int:
        """
        Carga el índice desde el registro durable. Un fallo de lectura no es
        fatal: se registra en el log y el índice queda vacío.

        :returns: cantidad de pedidos cargados.
        """
        with self._lock:
            self._indice = {}
            try:
                documento = self.registro.leer()
            except ErrorAlmacenamientoPedidos as e:
                logger.error("No se pudieron cargar los pedidos: %s", e.mensaje)
                self.hidratado = True
                return 0

            for data in documento.get("pedidos", []):
                try:
                    pedido = Pedido.desde_dict(data)
                except Exception as e:
                    logger.warning("Pedido ignorado al cargar (%r): %s", data, e)
                    continue
                self._indice[pedido.id] = pedido

            self.hidratado = True
            logger.info("Pedidos cargados exitosamente: %d", len(self._indice))
            return len(self._indice)

    # --------------------------------------------------------------------------
    # Lectura (solo índice)
    # --------------------------------------------------------------------------
    def listar(self) -> List[Pedido]:
        with self._lock:
            return list(self._indice.values())

    def obtener(self, id_pedido: Any) -> Pedido:
        clave = _normalizar_id(id_pedido)
        with self._lock:
            pedido = self._indice.get(clave) if clave is not None else None
        if pedido is None:
            raise PedidoNoEncontradoError()
        return pedido

    # --------------------------------------------------------------------------
    # Escritura
    # --------------------------------------------------------------------------
    def crear(self, cliente: Any, fecha: Any, estado: Any, campos_productos: Optional[Iterable[Any]]) -> Pedido:
        """
        Crea un pedido a partir de la secuencia plana de productos.

        :raises DatosDePedidoInvalidosError: si los productos o la cabecera no son válidos.
        :raises ErrorAlmacenamientoPedidos: si no se pudo leer o escribir el registro.
        """
        productos = agrupar_productos(campos_productos)
        borrador = Pedido.crear_nuevo(0, cliente, fecha, estado, productos)

        with self._lock:
            documento = self.registro.leer()
            pedidos_raw = list(documento.get("pedidos", []))
            nuevo_id = _siguiente_id(documento.get("siguiente_id"), pedidos_raw, self._indice)

            pedido = dataclasses.replace(borrador, id=nuevo_id)
            pedidos_raw.append(pedido.to_dict())
            self.registro.escribir({"siguiente_id": nuevo_id + 1, "pedidos": pedidos_raw})

            self._indice[pedido.id] = pedido

        logger.info("Pedido %s creado para %s (total %s)", pedido.id, pedido.cliente, pedido.total)
        self._publicar(EVENTO_NUEVO_PEDIDO, pedido.to_evento())
        return pedido

    def actualizar_estado(self, id_pedido: Any, nuevo_estado: Any) -> Pedido:
        """
        Cambia el estado de un pedido en el registro y, si la escritura tuvo
        éxito, en el índice.

        :raises PedidoNoEncontradoError: si el id no está en el índice o en el registro.
        :raises DatosDePedidoInvalidosError: si el estado no es uno de los permitidos.
        :raises ErrorAlmacenamientoPedidos: si falla la lectura o escritura del registro.
        """
        clave = _normalizar_id(id_pedido)
        with self._lock:
            actual = self._indice.get(clave) if clave is not None else None
            if actual is None:
                raise PedidoNoEncontradoError()
            estado = EstadoPedido.desde_texto(nuevo_estado)

            documento = self.registro.leer()
            pedidos_raw = list(documento.get("pedidos", []))
            posicion = next(
                (i for i, p in enumerate(pedidos_raw) if _normalizar_id(p.get("id")) == clave),
                None,
            )
            if posicion is None:
                raise PedidoNoEncontradoError()

            pedidos_raw[posicion] = dict(pedidos_raw[posicion], estado=estado.value)
            documento = dict(documento, pedidos=pedidos_raw)
            self.registro.escribir(documento)

            actualizado = dataclasses.replace(actual, estado=estado)
            self._indice[clave] = actualizado

        logger.info("Pedido %s actualizado a %s", clave, estado.value)
        self._publicar(EVENTO_PEDIDO_ACTUALIZADO, {"id": clave, "estado": estado.value})
        return actualizado

    def eliminar(self, id_pedido: Any) -> Pedido:
        """
        Quita el pedido del índice. El registro durable no se modifica, así que
        el pedido vuelve a aparecer al hidratar de nuevo.

        :raises PedidoNoEncontradoError: si el id no está en el índice.
        """
        clave = _normalizar_id(id_pedido)
        with self._lock:
            pedido = self._indice.pop(clave, None) if clave is not None else None
        if pedido is None:
            raise PedidoNoEncontradoError()

        logger.info("Pedido %s eliminado del índice", clave)
        self._publicar(EVENTO_PEDIDO_ELIMINADO, {"id": clave})
        return pedido

    # --------------------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------------------
    def _publicar(self, evento: str, datos: dict) -> None:
        if self.notificador is None:
            return
        try:
            self.notificador.publicar(evento, datos)
        except Exception:
            # El aviso en tiempo real no debe afectar al pedido ya confirmado
            logger.exception("No se pudo publicar el evento %s", evento)


def _normalizar_id(valor: Any) -> Optional[int]:
    if isinstance(valor, bool):
        return None
    if isinstance(valor, int):
        return valor
    try:
        return int(str(valor).strip())
    except (TypeError, ValueError):
        return None


def _siguiente_id(contador: Any, pedidos_raw: List[dict], indice: Dict[int, Pedido]) -> int:
    """
    Contador monótono guardado junto al registro. Si el documento no trae
    contador se usa max(id) + 1. Nunca devuelve un id ya usado.
    """
    usados = [i for i in (_normalizar_id(p.get("id")) for p in pedidos_raw) if i is not None]
    usados.extend(indice.keys())
    minimo = max(usados) + 1 if usados else 1
    contador = _normalizar_id(contador)
    return max(contador, minimo) if contador is not None else minimo
