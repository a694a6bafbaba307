class ExcepcionDominio(Exception):
    """Clase base para todas las excepciones de dominio de pedidos."""
    def __init__(self, mensaje="Error en el pedido."):
        self.mensaje = mensaje
        super().__init__(self.mensaje)

class PedidoNoEncontradoError(ExcepcionDominio):
    """Excepción lanzada cuando un pedido no existe en el índice."""
    def __init__(self, mensaje="Pedido no encontrado"):
        super().__init__(mensaje)

class DatosDePedidoInvalidosError(ExcepcionDominio):
    """Excepción lanzada cuando los datos de entrada para un pedido son inválidos."""
    def __init__(self, mensaje="Debe agregar productos válidos con cantidades y precios mayores que 0."):
        super().__init__(mensaje)

class ErrorAlmacenamientoPedidos(ExcepcionDominio):
    """Excepción lanzada cuando no se puede leer o escribir el archivo de pedidos."""
    def __init__(self, mensaje="Error al guardar los cambios."):
        super().__init__(mensaje)
