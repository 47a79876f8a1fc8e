"""
Contratos con el host que ejecuta los nodos.

Este contrato existe para:
- Que los casos de uso no dependan del runtime del motor de workflows.
- Facilitar tests unitarios sin red ni host real.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from seatable_nodes.domain.entities.dtable import ApiCredentials


class RequestExecutor(Protocol):
    """
    Ejecuta una petición HTTP autenticada y devuelve el JSON parseado.

    Implementaciones:
    - httpx (HttpxRequestExecutor).
    - Fake en memoria para tests.
    """

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
        """
        Lanza cualquier excepción ante fallos de transporte, respuestas
        no-2xx o cuerpos que no son JSON; el cliente la envuelve en
        SeaTableApiException conservando el error original.
        """


class CredentialsProvider(Protocol):
    """Credenciales almacenadas por el host (servidor + token estático)."""

    def get_credentials(self) -> Optional[ApiCredentials]:
        """Retorna None si no hay credenciales configuradas."""


class ParameterSource(Protocol):
    """Parámetros del nodo, opcionalmente distintos por item de entrada."""

    def get(self, name: str, index: int = 0, default: Any = None) -> Any:
        """Valor del parámetro `name` para el item `index`."""


class CursorStore(Protocol):
    """Slot clave/valor del host donde el trigger guarda su cursor."""

    def load(self) -> Optional[str]:
        """Último timestamp revisado o None en la primera ejecución."""

    def save(self, value: str) -> None:
        """Persiste el timestamp revisado."""
