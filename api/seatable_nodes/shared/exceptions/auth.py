"""
Excepciones relacionadas con autenticación.
"""
from seatable_nodes.shared.exceptions.base import AppException


class AuthException(AppException):
    """Excepción base para errores de autenticación."""

    def __init__(self, message: str, error_code: str = "AUTH_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details
        )


class MissingCredentialsException(AuthException):
    """El host no entregó credenciales de SeaTable."""

    def __init__(self):
        super().__init__(
            message="SeaTable: No credentials got returned!",
            error_code="MISSING_CREDENTIALS"
        )
