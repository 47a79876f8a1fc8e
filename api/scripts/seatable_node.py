"""
CLI: ejecuta una vez el nodo de acción o el trigger de SeaTable.

Variables de entorno requeridas:
  - SEATABLE_API_TOKEN
  - SEATABLE_SERVER_URL (por defecto https://cloud.seatable.io)

Ejecución:
  python scripts/seatable_node.py action --operation metadata
  python scripts/seatable_node.py action --operation list --table Contacts --columns "Surname, Email"
  python scripts/seatable_node.py action --operation append --table Contacts --items rows.json
  python scripts/seatable_node.py action --operation update --table Contacts --row-id abc --data '{"Email": "x@y.z"}'
  python scripts/seatable_node.py poll --table Contacts --event update --manual
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `seatable_nodes/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o raíz del repo).
_REPO_ROOT = _API_ROOT.parent
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_REPO_ROOT / ".env", override=False)

from seatable_nodes.application.use_cases.action_use_cases import SeaTableActionUseCases
from seatable_nodes.application.use_cases.trigger_use_cases import SeaTableTriggerUseCases
from seatable_nodes.core.config import settings
from seatable_nodes.core.logging import setup_logging
from seatable_nodes.infrastructure.external.seatable.http_executor import HttpxRequestExecutor
from seatable_nodes.infrastructure.external.seatable.seatable_client import SeaTableClient
from seatable_nodes.infrastructure.host.local_host import (
    EnvCredentialsProvider,
    JsonFileCursorStore,
    MappingParameterSource,
)
from seatable_nodes.shared.constants.seatable_constants import ActionOperation, ExecutionMode
from seatable_nodes.shared.exceptions.base import AppException


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nodos SeaTable (acción / trigger)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_action = sub.add_parser("action", help="Ejecuta el nodo de acción")
    p_action.add_argument(
        "--operation",
        choices=[op.value for op in ActionOperation],
        default=ActionOperation.METADATA.value,
    )
    p_action.add_argument("--table", type=str, default=None)
    p_action.add_argument("--columns", type=str, default="", help="Columnas adicionales, separadas por coma")
    p_action.add_argument("--limit", type=int, default=None, help="Solo list: máximo de filas (1..100)")
    p_action.add_argument("--row-id", type=str, default=None)
    p_action.add_argument("--data", type=str, default=None, help="JSON de la fila (create/update)")
    p_action.add_argument("--items", type=str, default=None, help="Archivo JSON con lista de items")
    p_action.add_argument("--search-column", type=str, default=None)
    p_action.add_argument("--search-term", type=str, default=None)
    p_action.add_argument("--exact", action="store_true", help="Búsqueda por igualdad exacta")

    p_poll = sub.add_parser("poll", help="Ejecuta un poll del trigger")
    p_poll.add_argument("--table", type=str, required=True)
    p_poll.add_argument("--event", choices=["create", "update"], default="create")
    p_poll.add_argument("--columns", type=str, default="")
    p_poll.add_argument("--manual", action="store_true", help="Modo manual (mira 2 minutos atrás)")
    p_poll.add_argument("--state-file", type=str, default=settings.TRIGGER_STATE_FILE)

    return parser


def _read_items(path: Optional[str]) -> list[dict[str, Any]]:
    if not path:
        return []
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return data if isinstance(data, list) else [data]


async def _run_action(args: argparse.Namespace, client: SeaTableClient) -> list[dict[str, Any]]:
    parameters = MappingParameterSource({
        "operation": args.operation,
        "table": args.table,
        "column_names": args.columns,
        "return_all": args.limit is None,
        "limit": args.limit,
        "row_id": args.row_id,
        "row": json.loads(args.data) if args.data else None,
        "search_column": args.search_column,
        "search_term": args.search_term,
        "wildcard": not args.exact,
    })
    return await SeaTableActionUseCases(client, parameters).execute(_read_items(args.items))


async def _run_poll(args: argparse.Namespace, client: SeaTableClient) -> list[dict[str, Any]]:
    parameters = MappingParameterSource({
        "table": args.table,
        "operation": args.event,
        "column_names": args.columns,
    })
    use_cases = SeaTableTriggerUseCases(
        client,
        parameters,
        JsonFileCursorStore(args.state_file),
        mode=ExecutionMode.MANUAL if args.manual else ExecutionMode.TRIGGER,
    )
    return await use_cases.poll() or []


async def _run(args: argparse.Namespace) -> list[dict[str, Any]]:
    client = SeaTableClient(HttpxRequestExecutor(), EnvCredentialsProvider())
    if args.command == "action":
        return await _run_action(args, client)
    return await _run_poll(args, client)


def main() -> int:
    args = _build_parser().parse_args()
    setup_logging()

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}: {args.command}")
    try:
        rows = asyncio.run(_run(args))
    except AppException as e:
        logger.error(f"{e.error_code}: {e.message}")
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1

    print(json.dumps(rows, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
