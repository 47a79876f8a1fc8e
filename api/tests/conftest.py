"""
Configuración de fixtures para pytest.

Incluye un ejecutor de requests falso y un SeaTable en memoria que
responde a los endpoints que usan los nodos.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import unquote

import pytest

from seatable_nodes.domain.entities.dtable import ApiCredentials
from seatable_nodes.infrastructure.external.seatable.seatable_client import SeaTableClient
from seatable_nodes.infrastructure.host.local_host import StaticCredentialsProvider


SERVER = "https://cloud.seatable.io"
API_TOKEN = "api-token"
ACCESS_TOKEN = "access-token"
DTABLE_UUID = "uuid-1"

TOKEN_URL = f"{SERVER}/api/v2.1/dtable/app-access-token/"
BASE_URL = f"{SERVER}/dtable-server/api/v1/dtables/{DTABLE_UUID}/"
METADATA_URL = BASE_URL + "metadata/"
ROWS_URL = BASE_URL + "rows/"


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    json: Any = None
    options: dict[str, Any] = field(default_factory=dict)


class FakeRequestExecutor:
    """Registra cada llamada y delega la respuesta en `handler`."""

    def __init__(self, handler: Callable[[RecordedCall], Any]) -> None:
        self._handler = handler
        self.calls: list[RecordedCall] = []

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
        call = RecordedCall(
            method=method,
            url=url,
            headers=dict(headers or {}),
            params=dict(params or {}),
            json=copy.deepcopy(json),
            options=options,
        )
        self.calls.append(call)
        result = self._handler(call)
        if isinstance(result, Exception):
            raise result
        return result

    def calls_to(self, url: str, method: Optional[str] = None) -> list[RecordedCall]:
        return [c for c in self.calls if c.url == url and (method is None or c.method == method)]


def token_response() -> dict[str, Any]:
    return {
        "app_name": "n8n",
        "access_token": ACCESS_TOKEN,
        "dtable_uuid": DTABLE_UUID,
        "dtable_server": f"{SERVER}/dtable-server/",
        "dtable_socket": f"{SERVER}/",
        "workspace_id": 7,
        "dtable_name": "CRM",
    }


def contacts_table() -> dict[str, Any]:
    return {
        "_id": "0000",
        "name": "Contacts",
        "columns": [
            {"key": "0000", "name": "Title", "type": "text"},
            {"key": "a1b2", "name": "Surname", "type": "text"},
            {"key": "c3d4", "name": "Tags", "type": "multiple-select"},
            {"key": "e5f6", "name": "Location", "type": "geolocation"},
        ],
    }


def projects_table() -> dict[str, Any]:
    return {
        "_id": "p000",
        "name": "Projects",
        "columns": [{"key": "0000", "name": "Name", "type": "text"}],
    }


class FakeSeaTable:
    """
    SeaTable en memoria.

    Las filas se guardan por nombre de columna (como devuelve el listado);
    el POST responde con claves internas de columna, como el API real.
    """

    def __init__(self, tables: list[dict[str, Any]], rows: Optional[dict[str, list[dict[str, Any]]]] = None):
        self.tables = tables
        self.rows = rows or {t["name"]: [] for t in tables}
        self._next_id = 1

    def _columns(self, table_name: str) -> list[dict[str, Any]]:
        return next(t["columns"] for t in self.tables if t["name"] == table_name)

    def __call__(self, call: RecordedCall) -> Any:
        if call.url == TOKEN_URL:
            return token_response()
        if call.url == METADATA_URL:
            return {"metadata": {"tables": self.tables, "version": "1", "format_version": "1"}}
        if call.url == ROWS_URL:
            return self._rows(call)
        if call.url.startswith(ROWS_URL) and call.method == "GET":
            return self._row_by_id(call)
        if call.url in (BASE_URL + "lock-rows/", BASE_URL + "unlock-rows/"):
            return {"success": True}
        raise AssertionError(f"Request inesperado: {call.method} {call.url}")

    def _rows(self, call: RecordedCall) -> Any:
        if call.method == "GET":
            rows = self.rows[call.params["table_name"]]
            start = int(call.params.get("start", 0))
            limit = int(call.params.get("limit", 1000))
            return {"rows": copy.deepcopy(rows[start:start + limit])}
        if call.method == "POST":
            return self._insert(call.json["table_name"], call.json["row"])
        if call.method == "PUT":
            return {"success": True}
        if call.method == "DELETE":
            return {"deleted_rows": 1}
        raise AssertionError(f"Método inesperado: {call.method}")

    def _insert(self, table_name: str, data: dict[str, Any]) -> dict[str, Any]:
        row_id = f"row{self._next_id}"
        self._next_id += 1
        stored = {
            "_id": row_id,
            "_ctime": "2024-05-01T10:00:00.000+00:00",
            "_mtime": "2024-05-01T10:00:00.000+00:00",
            **data,
        }
        self.rows[table_name].append(stored)

        keys_by_name = {c["name"]: c["key"] for c in self._columns(table_name)}
        response = {"_id": row_id, "_creator": "someone@example.com"}
        for name, value in data.items():
            if name in keys_by_name:
                response[keys_by_name[name]] = value
        return response

    def _row_by_id(self, call: RecordedCall) -> Any:
        row_id = unquote(call.url[len(ROWS_URL):].rstrip("/"))
        for row in self.rows[call.params["table_name"]]:
            if row["_id"] == row_id:
                return copy.deepcopy(row)
        return {}


@pytest.fixture
def credentials() -> StaticCredentialsProvider:
    return StaticCredentialsProvider(ApiCredentials(server=SERVER, token=API_TOKEN))


@pytest.fixture
def contact_rows() -> list[dict[str, Any]]:
    return [
        {
            "_id": "r1",
            "_ctime": "2024-05-01T09:00:00.000+00:00",
            "_mtime": "2024-05-02T09:00:00.000+00:00",
            "Title": "Dr",
            "Surname": "Who",
            "Tags": ["tv", "bbc"],
        },
        {
            "_id": "r2",
            "_ctime": "2024-05-01T11:00:00.000+00:00",
            "_mtime": "2024-05-01T11:00:00.000+00:00",
            "Title": "Ms",
            "Surname": "Pond",
            "Tags": [],
        },
        {
            "_id": "r3",
            "_ctime": "2024-05-01T10:00:00.000+00:00",
            "_mtime": "2024-05-03T08:00:00.000+00:00",
            "Title": "Mr",
            "Surname": "Williams",
            "Location": {"lat": 1, "lng": 2},
        },
    ]


@pytest.fixture
def fake_seatable(contact_rows) -> FakeSeaTable:
    return FakeSeaTable(
        [contacts_table(), projects_table()],
        {"Contacts": contact_rows, "Projects": []},
    )


@pytest.fixture
def executor(fake_seatable) -> FakeRequestExecutor:
    return FakeRequestExecutor(fake_seatable)


@pytest.fixture
def client(executor, credentials) -> SeaTableClient:
    return SeaTableClient(executor, credentials)
