"""
Cliente SeaTable de una invocación: request autenticado y paginación.
"""
from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from seatable_nodes.application.interfaces.host import CredentialsProvider, RequestExecutor
from seatable_nodes.domain.entities.dtable import DtableColumn, DtableMetadata, SeaTableContext
from seatable_nodes.infrastructure.external.seatable.context_builder import (
    build_context,
    request_json,
    stage_app_access_token,
    stage_dtable_metadata,
)
from seatable_nodes.infrastructure.external.seatable.endpoints import expand_endpoint
from seatable_nodes.shared.constants.seatable_constants import ROW_FETCH_SEGMENT_LIMIT
from seatable_nodes.shared.exceptions.domain import TableNotFoundException


class SeaTableClient:
    """
    Cliente HTTP de SeaTable para una única invocación de nodo.

    Importante:
    - Guarda el último snapshot del contexto, así el token y la metadata
      se piden como máximo una vez por invocación.
    - No se comparte entre invocaciones.
    - Sin reintentos: cualquier fallo termina en SeaTableApiException.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        credentials: CredentialsProvider,
        *,
        ctx: Optional[SeaTableContext] = None,
    ) -> None:
        self._executor = executor
        self._credentials = credentials
        self._ctx = ctx or build_context()

    @property
    def context(self) -> SeaTableContext:
        return self._ctx

    async def ensure_app_access_token(self) -> SeaTableContext:
        self._ctx = await stage_app_access_token(self._ctx, self._credentials, self._executor)
        return self._ctx

    async def ensure_metadata(self) -> SeaTableContext:
        self._ctx = await stage_dtable_metadata(self._ctx, self._credentials, self._executor)
        return self._ctx

    async def api_metadata(self) -> DtableMetadata:
        ctx = await self.ensure_metadata()
        return ctx.metadata

    async def api_dtable_columns(self, table_name: str) -> list[DtableColumn]:
        """Columnas (tipos conocidos) de una tabla, en orden declarado."""
        metadata = await self.api_metadata()
        table = metadata.find_table(table_name)
        if table is None:
            raise TableNotFoundException(table_name)
        return table.supported_columns

    async def api_request(
        self,
        method: str,
        endpoint: str,
        body: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
        uri: Optional[str] = None,
        option: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Un request autenticado contra SeaTable.

        Args:
            method: Método HTTP
            endpoint: Plantilla de endpoint (ver expand_endpoint)
            body: Cuerpo JSON; vacío u omitido no se envía
            query: Parámetros de querystring
            uri: URL completa que reemplaza al endpoint
            option: Opciones extra para el ejecutor

        Returns:
            El JSON de la respuesta
        """
        ctx = await self.ensure_app_access_token()

        kwargs: dict[str, Any] = {
            "headers": {"Authorization": expand_endpoint(ctx, "Token {{access_token}}")},
            "params": dict(query or {}),
        }
        if body:
            kwargs["json"] = body
        if option:
            kwargs.update(option)

        url = uri or expand_endpoint(ctx, endpoint)
        return await request_json(self._executor, method, url, **kwargs)

    async def api_request_all_items(
        self,
        method: str,
        endpoint: str,
        body: Optional[dict[str, Any]] = None,
        query: Optional[dict[str, Any]] = None,
    ) -> dict[str, list[dict[str, Any]]]:
        """
        Drena un listado de filas en páginas de ROW_FETCH_SEGMENT_LIMIT.

        Continúa mientras una página traiga más de ROW_FETCH_SEGMENT_LIMIT - 1
        filas: una página de exactamente 1000 filas pide otra y una de 999
        o menos termina.

        Limitación conocida: no hay tope de páginas; un servidor que nunca
        devuelva una página corta hace que el loop no termine.
        """
        segment = ROW_FETCH_SEGMENT_LIMIT
        start = 0
        rows: list[dict[str, Any]] = []
        pages = 0

        while True:
            page_query = {**(query or {}), "start": start, "limit": segment}
            response = await self.api_request(method, endpoint, body, page_query)
            page_rows = (response or {}).get("rows") or []
            rows.extend(page_rows)
            pages += 1
            start += segment
            if not len(page_rows) > segment - 1:
                break

        logger.debug(f"SeaTable: {len(rows)} filas en {pages} páginas")
        return {"rows": rows}
