"""
Implementaciones locales de los contratos del host.

Sirven para ejecutar los nodos fuera de un motor de workflows (CLI, jobs)
y como dobles simples en tests.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from loguru import logger

from seatable_nodes.core.config import Settings, settings as default_settings
from seatable_nodes.domain.entities.dtable import ApiCredentials


class EnvCredentialsProvider:
    """Credenciales desde Settings (SEATABLE_SERVER_URL / SEATABLE_API_TOKEN)."""

    def __init__(self, app_settings: Optional[Settings] = None) -> None:
        self._settings = app_settings or default_settings

    def get_credentials(self) -> Optional[ApiCredentials]:
        if not self._settings.SEATABLE_API_TOKEN:
            return None
        return ApiCredentials(
            server=self._settings.SEATABLE_SERVER_URL,
            token=self._settings.SEATABLE_API_TOKEN,
        )


class StaticCredentialsProvider:
    def __init__(self, credentials: Optional[ApiCredentials]) -> None:
        self._credentials = credentials

    def get_credentials(self) -> Optional[ApiCredentials]:
        return self._credentials


class MappingParameterSource:
    """
    Parámetros desde un dict.

    `per_item` permite sobreescribir parámetros para un item concreto:
    per_item[i] tiene prioridad sobre los parámetros comunes.
    """

    def __init__(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        per_item: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> None:
        self._parameters = dict(parameters or {})
        self._per_item = list(per_item or [])

    def get(self, name: str, index: int = 0, default: Any = None) -> Any:
        if index < len(self._per_item) and name in self._per_item[index]:
            return self._per_item[index][name]
        return self._parameters.get(name, default)


class InMemoryCursorStore:
    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value

    def load(self) -> Optional[str]:
        return self.value

    def save(self, value: str) -> None:
        self.value = value


class JsonFileCursorStore:
    """
    Cursor del trigger persistido en un archivo JSON.

    Formato: {"lastTimeChecked": "2021-03-04T10:20:30.123+00:00"}
    """

    KEY = "lastTimeChecked"

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    def load(self) -> Optional[str]:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        return data.get(self.KEY)

    def save(self, value: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({self.KEY: value}), encoding="utf-8")
        logger.debug(f"Cursor del trigger guardado en {self._path}: {value}")
