class ExcepcionDominio(Exception):
    """Clase base para las excepciones de usuarios y autenticación."""
    def __init__(self, mensaje="Error de autenticación."):
        self.mensaje = mensaje
        super().__init__(self.mensaje)

class UsuarioDuplicadoError(ExcepcionDominio):
    """El nombre de usuario ya está registrado."""
    def __init__(self, mensaje="The username is already in use. Please choose another one."):
        super().__init__(mensaje)

class CredencialesInvalidasError(ExcepcionDominio):
    def __init__(self, mensaje="Credenciales inválidas. Verifique su usuario y contraseña."):
        super().__init__(mensaje)

class UsuarioNoEncontradoError(ExcepcionDominio):
    def __init__(self, mensaje="Usuario no encontrado"):
        super().__init__(mensaje)
