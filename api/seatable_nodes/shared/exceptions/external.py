"""
Excepciones de integración con el API HTTP de SeaTable.
"""
from typing import Any, Optional

import httpx

from seatable_nodes.shared.exceptions.base import AppException


class SeaTableApiException(AppException):
    """
    Error de transporte o respuesta no-2xx de SeaTable.

    Conserva el error original y la respuesta (si existe) para diagnóstico.
    """

    def __init__(self, error: Exception, *, method: str = "", url: str = ""):
        response: Optional[httpx.Response] = getattr(error, "response", None)
        if isinstance(error, httpx.HTTPStatusError) and response is not None:
            message = f"SeaTable API error {response.status_code}: {response.text[:500]}"
            status = response.status_code
        else:
            message = f"SeaTable API request failed: {error}"
            status = None

        super().__init__(
            message=message,
            status_code=502,
            error_code="SEATABLE_API_ERROR",
            details={"method": method, "url": url, "status": status}
        )
        self.error = error
        self.response: Any = response
