# servicios/servicio_pedidos/aplicacion/repositorios/repositorio_pedido_interface.py

from abc import ABC, abstractmethod

# Contrato del registro durable de pedidos (el documento completo con todos los pedidos).
# El almacén de pedidos depende únicamente de esta interfaz.
class IRegistroPedidos(ABC):

    @abstractmethod
    def leer(self) -> dict:
        """
        Devuelve el documento completo: {"siguiente_id": int | None, "pedidos": [dict, ...]}.

        :raises ErrorAlmacenamientoPedidos: si el documento no se puede leer o interpretar.
        """
        pass

    @abstractmethod
    def escribir(self, documento: dict) -> None:
        """
        Reemplaza el documento completo.

        :raises ErrorAlmacenamientoPedidos: si no se puede escribir.
        """
        pass
