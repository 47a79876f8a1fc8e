"""
Casos de uso del nodo de acción SeaTable.

Operaciones: metadata, list, append, create, get, search, update,
remove, lock y unlock. Todo es secuencial: un fallo en un item aborta
los items restantes.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Sequence
from urllib.parse import quote

from loguru import logger

from seatable_nodes.application.dto.node_dto import (
    CreateParametersDTO,
    ListParametersDTO,
    RowParametersDTO,
    SearchParametersDTO,
    TableParametersDTO,
    UpdateParametersDTO,
    load_parameters,
)
from seatable_nodes.application.interfaces.host import ParameterSource
from seatable_nodes.application.services.row_formatter import (
    column_names_to_list,
    row_delete_internal_columns,
    row_format_columns,
    row_map_columns_from_keys_to_names,
    rows_format_columns,
    rows_search,
    select_output_columns,
)
from seatable_nodes.infrastructure.external.seatable.seatable_client import SeaTableClient
from seatable_nodes.shared.constants.seatable_constants import (
    LOCK_ROWS_ENDPOINT,
    ROWS_ENDPOINT,
    UNLOCK_ROWS_ENDPOINT,
    ActionOperation,
)
from seatable_nodes.shared.exceptions.domain import (
    MissingRowIdentityException,
    UnknownOperationException,
)

Row = dict[str, Any]


def _row_endpoint(row_id: str) -> str:
    return f"{ROWS_ENDPOINT}{quote(str(row_id), safe='')}/"


class SeaTableActionUseCases:
    """
    Nodo de acción: lee, escribe y borra datos de SeaTable.

    Uso:
        client = SeaTableClient(HttpxRequestExecutor(), EnvCredentialsProvider())
        use_cases = SeaTableActionUseCases(client, MappingParameterSource({...}))
        rows = await use_cases.execute(items)
    """

    def __init__(self, client: SeaTableClient, parameters: ParameterSource):
        self.client = client
        self.parameters = parameters
        self._handlers: dict[ActionOperation, Callable[[list[Row]], Awaitable[list[Row]]]] = {
            ActionOperation.APPEND: self._append,
            ActionOperation.CREATE: self._create,
            ActionOperation.GET: self._get,
            ActionOperation.LIST: self._list,
            ActionOperation.LOCK: self._lock,
            ActionOperation.METADATA: self._metadata,
            ActionOperation.REMOVE: self._remove,
            ActionOperation.SEARCH: self._search,
            ActionOperation.UNLOCK: self._unlock,
            ActionOperation.UPDATE: self._update,
        }

    async def execute(self, items: Optional[Sequence[Row]] = None) -> list[Row]:
        """
        Ejecuta la operación configurada sobre los items de entrada.

        Args:
            items: Items JSON de entrada (uno por fila para append/create/get/...)

        Returns:
            Lista de objetos JSON, uno por fila o por respuesta del API
        """
        raw_operation = self.parameters.get("operation", 0, ActionOperation.METADATA.value)
        try:
            operation = ActionOperation(raw_operation)
        except ValueError:
            raise UnknownOperationException(raw_operation)

        items = list(items or [])
        logger.info(f"SeaTable: operación '{operation.value}' ({len(items)} items)")
        return await self._handlers[operation](items)

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    async def _metadata(self, items: list[Row]) -> list[Row]:
        table_name = self.parameters.get("table", 0)
        metadata = await self.client.api_metadata()

        tables = list(metadata.tables)
        selected = metadata.find_table(table_name) if table_name else None
        if selected is not None:
            tables = [selected]

        return [
            {
                "name": table.name,
                "columns": ", ".join(c.name for c in table.supported_columns),
            }
            for table in tables
        ]

    async def _list(self, items: list[Row]) -> list[Row]:
        params = load_parameters(ListParametersDTO, self.parameters)
        columns = await self.client.api_dtable_columns(params.table)

        query: dict[str, Any] = {"table_name": params.table}
        if params.return_all:
            response = await self.client.api_request_all_items("GET", ROWS_ENDPOINT, None, query)
        else:
            query["limit"] = params.limit
            response = await self.client.api_request("GET", ROWS_ENDPOINT, None, query)

        column_names = select_output_columns(columns, column_names_to_list(params.column_names))
        return rows_format_columns(response.get("rows") or [], column_names)

    async def _get(self, items: list[Row]) -> list[Row]:
        result: list[Row] = []
        for index, _ in enumerate(items or [{}]):
            params = load_parameters(RowParametersDTO, self.parameters, index)
            columns = await self.client.api_dtable_columns(params.table)
            row = await self.client.api_request(
                "GET",
                _row_endpoint(params.row_id),
                None,
                {"table_name": params.table, "convert": True},
            )
            column_names = select_output_columns(columns, column_names_to_list(params.column_names))
            result.append(row_format_columns(row, column_names))
        return result

    async def _search(self, items: list[Row]) -> list[Row]:
        result: list[Row] = []
        for index, _ in enumerate(items or [{}]):
            params = load_parameters(SearchParametersDTO, self.parameters, index)
            columns = await self.client.api_dtable_columns(params.table)
            response = await self.client.api_request_all_items(
                "GET", ROWS_ENDPOINT, None, {"table_name": params.table}
            )
            found = rows_search(
                response["rows"], params.search_column, params.search_term, params.wildcard
            )
            logger.debug(f"SeaTable: búsqueda en '{params.search_column}' -> {len(found)} filas")
            column_names = select_output_columns(columns, column_names_to_list(params.column_names))
            result.extend(rows_format_columns(found, column_names))
        return result

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    async def _append(self, items: list[Row]) -> list[Row]:
        table = load_parameters(TableParametersDTO, self.parameters).table
        result: list[Row] = []
        for item in items:
            result.append(await self._insert_row(table, item))
        return result

    async def _create(self, items: list[Row]) -> list[Row]:
        result: list[Row] = []
        for index, item in enumerate(items or [{}]):
            params = load_parameters(CreateParametersDTO, self.parameters, index)
            data = params.row if params.row is not None else item
            result.append(await self._insert_row(params.table, data))
        return result

    async def _insert_row(self, table: str, data: Row) -> Row:
        """
        Inserta una fila y la devuelve con nombres de columna y valores convertidos.

        1. POST de la fila (la respuesta viene con claves internas de columna)
        2. GET de la fila por _id con convert=true
        3. Merge (gana lo leído), formato y sin campos internos
        """
        columns = await self.client.api_dtable_columns(table)
        response = await self.client.api_request(
            "POST", ROWS_ENDPOINT, {"table_name": table, "row": data}
        )
        insert_id = response.get("_id") if isinstance(response, dict) else None
        if not insert_id:
            raise MissingRowIdentityException()

        inserted = row_map_columns_from_keys_to_names(response, columns)
        new_row = await self.client.api_request(
            "GET", _row_endpoint(insert_id), None, {"table_name": table, "convert": True}
        )
        if not isinstance(new_row, dict) or not new_row.get("_id"):
            raise MissingRowIdentityException("SeaTable: No identity for inserted row.")

        row = row_format_columns({**inserted, **new_row}, [c.name for c in columns])
        return row_delete_internal_columns(row)

    async def _update(self, items: list[Row]) -> list[Row]:
        result: list[Row] = []
        for index, item in enumerate(items or [{}]):
            overrides = None if self.parameters.get("row", index) is not None else {"row": item}
            params = load_parameters(UpdateParametersDTO, self.parameters, index, overrides)
            response = await self.client.api_request(
                "PUT",
                ROWS_ENDPOINT,
                {"table_name": params.table, "row_id": params.row_id, "row": params.row},
            )
            result.append(response)
        return result

    async def _remove(self, items: list[Row]) -> list[Row]:
        result: list[Row] = []
        for index, _ in enumerate(items or [{}]):
            params = load_parameters(RowParametersDTO, self.parameters, index)
            response = await self.client.api_request(
                "DELETE",
                ROWS_ENDPOINT,
                {"table_name": params.table, "row_id": params.row_id},
            )
            result.append(response)
        return result

    async def _lock(self, items: list[Row]) -> list[Row]:
        return await self._set_lock(items, LOCK_ROWS_ENDPOINT)

    async def _unlock(self, items: list[Row]) -> list[Row]:
        return await self._set_lock(items, UNLOCK_ROWS_ENDPOINT)

    async def _set_lock(self, items: list[Row], endpoint: str) -> list[Row]:
        result: list[Row] = []
        for index, _ in enumerate(items or [{}]):
            params = load_parameters(RowParametersDTO, self.parameters, index)
            response = await self.client.api_request(
                "PUT",
                endpoint,
                {"table_name": params.table, "row_ids": [params.row_id]},
            )
            result.append(response)
        return result
