"""
Entidades de dominio: credenciales, token de la base, metadata y contexto.

Todas son inmutables; el contexto se reemplaza en cada etapa de staging.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from seatable_nodes.shared.constants.seatable_constants import COLUMN_TYPES


@dataclass(frozen=True)
class ApiCredentials:
    """Credenciales estáticas guardadas por el host."""

    server: str
    token: str


@dataclass(frozen=True)
class AppAccessToken:
    """Respuesta del intercambio de token (app-access-token)."""

    access_token: str
    dtable_uuid: str
    dtable_server: Optional[str] = None
    dtable_socket: Optional[str] = None
    workspace_id: Optional[int] = None
    dtable_name: Optional[str] = None
    app_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppAccessToken:
        return cls(
            access_token=data["access_token"],
            dtable_uuid=data["dtable_uuid"],
            dtable_server=data.get("dtable_server"),
            dtable_socket=data.get("dtable_socket"),
            workspace_id=data.get("workspace_id"),
            dtable_name=data.get("dtable_name"),
            app_name=data.get("app_name"),
        )


@dataclass(frozen=True)
class DtableColumn:
    key: str
    name: str
    type: str

    @property
    def is_supported(self) -> bool:
        """True si el tipo de columna es uno de los conocidos."""
        return self.type in COLUMN_TYPES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DtableColumn:
        return cls(key=data["key"], name=data["name"], type=data.get("type", ""))


@dataclass(frozen=True)
class DtableTable:
    id: str
    name: str
    columns: tuple[DtableColumn, ...] = ()

    @property
    def supported_columns(self) -> list[DtableColumn]:
        """Columnas en orden declarado, filtradas a tipos conocidos."""
        return [c for c in self.columns if c.is_supported]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DtableTable:
        return cls(
            id=data.get("_id", ""),
            name=data["name"],
            columns=tuple(DtableColumn.from_dict(c) for c in data.get("columns") or []),
        )


@dataclass(frozen=True)
class DtableMetadata:
    """Metadata de una base: lista de tablas con sus columnas."""

    tables: tuple[DtableTable, ...] = ()
    version: Optional[str] = None
    format_version: Optional[str] = None

    def find_table(self, table_name: str) -> Optional[DtableTable]:
        return next((t for t in self.tables if t.name == table_name), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DtableMetadata:
        return cls(
            tables=tuple(DtableTable.from_dict(t) for t in data["tables"]),
            version=data.get("version"),
            format_version=data.get("format_version"),
        )


@dataclass(frozen=True)
class SeaTableContext:
    """
    Contexto de una invocación.

    Se crea vacío y se completa por etapas (credenciales, token, metadata).
    Nunca se comparte entre invocaciones.
    """

    api: Optional[ApiCredentials] = None
    app_access_token: Optional[AppAccessToken] = None
    metadata: Optional[DtableMetadata] = field(default=None, repr=False)

    @property
    def server(self) -> Optional[str]:
        return self.api.server if self.api else None
