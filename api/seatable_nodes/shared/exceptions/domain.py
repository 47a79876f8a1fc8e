"""
Excepciones de configuración y validación de los nodos.
"""
from typing import Any

from seatable_nodes.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ValidationException(DomainException):
    """Excepción para errores de validación."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class TableNotFoundException(DomainException):
    """La tabla pedida no existe en la metadata de la base."""

    def __init__(self, table_name: str):
        super().__init__(
            message=f'SeaTable: Not a table: "{table_name}".',
            error_code="TABLE_NOT_FOUND",
            details={"table": table_name}
        )
        self.status_code = 404


class UnknownOperationException(DomainException):
    """Operación de nodo no soportada."""

    def __init__(self, operation: Any):
        super().__init__(
            message=f'The operation "{operation}" is not known!',
            error_code="UNKNOWN_OPERATION",
            details={"operation": str(operation)}
        )


class FieldNotFoundException(DomainException):
    """La columna de timestamp del trigger no viene en las filas."""

    def __init__(self, field: str):
        super().__init__(
            message=f'The Field "{field}" does not exist.',
            error_code="FIELD_NOT_FOUND",
            details={"field": field}
        )


class MissingRowIdentityException(DomainException):
    """El API no devolvió el _id de una fila insertada."""

    def __init__(self, message: str = "SeaTable: No identity after appending row."):
        super().__init__(
            message=message,
            error_code="MISSING_ROW_IDENTITY"
        )
