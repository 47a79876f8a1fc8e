"""
Raíz de los errores que los nodos entregan al host.

Familias:
- auth: el host no entregó credenciales (MissingCredentialsException).
- domain: parámetros inválidos o respuestas de SeaTable sin los campos
  esperados (ValidationException, TableNotFoundException, ...).
- external: fallo del request contra SeaTable (SeaTableApiException).

Cualquier otra excepción que llegue al host es un bug de los nodos.
"""
from typing import Any, Optional


class AppException(Exception):
    """
    Error de un nodo SeaTable.

    `status_code` es el código HTTP equivalente (4xx configuración o
    validación, 502 API) y `error_code` un identificador estable que el
    host puede mostrar o filtrar.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Forma serializable para la salida de error del host."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }
