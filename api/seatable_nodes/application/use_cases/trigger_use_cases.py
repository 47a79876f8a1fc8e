"""
Caso de uso del nodo trigger SeaTable (polling).

Diseño (resumen):
- Carga el cursor (último timestamp revisado) desde el host
- Trae todas las filas de la tabla (paginado)
- Guarda "ahora" como nuevo cursor
- Filtra por _ctime/_mtime > cursor y ordena ascendente (empate: orden del servidor)
"""
from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from seatable_nodes.application.dto.node_dto import TriggerParametersDTO, load_parameters
from seatable_nodes.application.interfaces.host import CursorStore, ParameterSource
from seatable_nodes.application.services.row_formatter import (
    column_names_to_list,
    rows_format_columns,
    rows_time_filter,
    rows_time_sort,
    select_output_columns,
)
from seatable_nodes.infrastructure.external.seatable.seatable_client import SeaTableClient
from seatable_nodes.shared.constants.seatable_constants import (
    MANUAL_LOOKBACK_MINUTES,
    ROWS_ENDPOINT,
    ExecutionMode,
)
from seatable_nodes.shared.exceptions.domain import FieldNotFoundException
from seatable_nodes.shared.utils.datetime_utils import DateTimeUtils


class SeaTableTriggerUseCases:
    """
    Detecta filas creadas o modificadas desde el último poll.

    El host decide cuándo se invoca y no debe solaparse consigo mismo;
    aquí solo se persiste el cursor escalar.
    """

    def __init__(
        self,
        client: SeaTableClient,
        parameters: ParameterSource,
        cursor_store: CursorStore,
        mode: ExecutionMode = ExecutionMode.TRIGGER,
    ):
        self.client = client
        self.parameters = parameters
        self.cursor_store = cursor_store
        self.mode = ExecutionMode(mode)

    async def poll(self) -> Optional[list[dict[str, Any]]]:
        """
        Ejecuta un poll.

        Returns:
            Filas nuevas/modificadas en orden ascendente, o None si no hay eventos
        """
        params = load_parameters(TriggerParametersDTO, self.parameters)
        trigger_column = params.operation.column
        requested = column_names_to_list(params.column_names)

        now = DateTimeUtils.now_utc()
        last_checked = now
        if self.mode is ExecutionMode.MANUAL:
            last_checked = DateTimeUtils.minutes_before(now, MANUAL_LOOKBACK_MINUTES)

        start_date = self.cursor_store.load() or DateTimeUtils.to_cursor_string(last_checked)
        end_date = DateTimeUtils.to_cursor_string(now)

        columns = await self.client.api_dtable_columns(params.table)
        response = await self.client.api_request_all_items(
            "GET", ROWS_ENDPOINT, None, {"table_name": params.table}
        )
        self.cursor_store.save(end_date)

        rows = response["rows"]
        if not rows:
            logger.debug(f"SeaTable trigger: tabla '{params.table}' sin filas")
            return None

        if self.mode is ExecutionMode.MANUAL and trigger_column not in rows[0]:
            raise FieldNotFoundException(trigger_column)

        rows = rows_time_filter(rows, trigger_column, start_date)
        rows = rows_time_sort(rows, trigger_column)
        logger.info(
            f"SeaTable trigger: {len(rows)} filas con {trigger_column} > {start_date} "
            f"en '{params.table}'"
        )
        if not rows:
            return None

        column_names = select_output_columns(columns, requested)
        return rows_format_columns(rows, column_names)
