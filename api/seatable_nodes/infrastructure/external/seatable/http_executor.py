"""
Ejecutor HTTP por defecto basado en httpx.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
from loguru import logger

from seatable_nodes.core.config import settings


class HttpxRequestExecutor:
    """
    Una petición JSON por llamada, sin reintentos.

    - Respuestas no-2xx: httpx.HTTPStatusError (raise_for_status).
    - Cuerpo vacío: {}.
    - Si no se inyecta un AsyncClient se abre uno por petición.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._client = client
        self._timeout_s = settings.HTTP_TIMEOUT_S if timeout_s is None else timeout_s

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        **options: Any,
    ) -> Any:
        logger.debug(f"SeaTable HTTP {method} {url}")
        if self._client is not None:
            response = await self._client.request(
                method, url, headers=headers, params=params, json=json, **options
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                response = await client.request(
                    method, url, headers=headers, params=params, json=json, **options
                )

        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()
