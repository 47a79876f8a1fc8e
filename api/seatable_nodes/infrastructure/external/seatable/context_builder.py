"""
Staging del contexto de una invocación.

Cada etapa recibe un SeaTableContext y retorna uno nuevo (o el mismo si
la etapa ya estaba completa):

1. Credenciales del host (servidor + token estático).
2. Token de la base, vía intercambio app-access-token.
3. Metadata de la base (tablas y columnas).
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from loguru import logger

from seatable_nodes.application.interfaces.host import CredentialsProvider, RequestExecutor
from seatable_nodes.domain.entities.dtable import (
    ApiCredentials,
    AppAccessToken,
    DtableMetadata,
    SeaTableContext,
)
from seatable_nodes.infrastructure.external.seatable.endpoints import expand_endpoint, normalize
from seatable_nodes.shared.constants.seatable_constants import (
    APP_ACCESS_TOKEN_ENDPOINT,
    METADATA_ENDPOINT,
)
from seatable_nodes.shared.exceptions.auth import MissingCredentialsException
from seatable_nodes.shared.exceptions.base import AppException
from seatable_nodes.shared.exceptions.domain import ValidationException
from seatable_nodes.shared.exceptions.external import SeaTableApiException


def build_context(credentials: Optional[ApiCredentials] = None) -> SeaTableContext:
    """Contexto inicial; las credenciales son opcionales."""
    if credentials is None:
        return SeaTableContext()
    return SeaTableContext(api=_normalize_credentials(credentials))


def _normalize_credentials(credentials: ApiCredentials) -> ApiCredentials:
    server = (normalize(credentials.server) or "").rstrip("/")
    return replace(credentials, server=server)


def stage_api_credentials(ctx: SeaTableContext, provider: CredentialsProvider) -> SeaTableContext:
    if ctx.api is not None:
        return ctx

    credentials = provider.get_credentials()
    if credentials is None or not credentials.token or not credentials.server:
        logger.error("SeaTable: el host no entregó credenciales")
        raise MissingCredentialsException()

    return replace(ctx, api=_normalize_credentials(credentials))


async def stage_app_access_token(
    ctx: SeaTableContext,
    provider: CredentialsProvider,
    executor: RequestExecutor,
) -> SeaTableContext:
    ctx = stage_api_credentials(ctx, provider)
    if ctx.app_access_token is not None:
        return ctx

    url = expand_endpoint(ctx, APP_ACCESS_TOKEN_ENDPOINT)
    logger.debug(f"SeaTable: intercambiando token de la base en {ctx.server}")
    response = await request_json(
        executor,
        "GET",
        url,
        headers={"Authorization": f"Token {ctx.api.token}"},
    )

    if not isinstance(response, dict) or not response.get("access_token") or not response.get("dtable_uuid"):
        raise ValidationException(
            "SeaTable: Failed to obtain access token of the base.",
            field="access_token",
        )

    token = AppAccessToken.from_dict(response)
    logger.info(f"SeaTable: token obtenido para la base '{token.dtable_name or token.dtable_uuid}'")
    return replace(ctx, app_access_token=token)


async def stage_dtable_metadata(
    ctx: SeaTableContext,
    provider: CredentialsProvider,
    executor: RequestExecutor,
) -> SeaTableContext:
    ctx = await stage_app_access_token(ctx, provider, executor)
    if ctx.metadata is not None:
        return ctx

    response = await request_json(
        executor,
        "GET",
        expand_endpoint(ctx, METADATA_ENDPOINT),
        headers={"Authorization": expand_endpoint(ctx, "Token {{access_token}}")},
    )

    metadata = response.get("metadata") if isinstance(response, dict) else None
    if not isinstance(metadata, dict):
        raise ValidationException("SeaTable: Error while obtaining metadata.", field="metadata")
    if not isinstance(metadata.get("tables"), list):
        raise ValidationException("SeaTable: Metadata error.", field="tables")

    try:
        parsed = DtableMetadata.from_dict(metadata)
    except (AttributeError, KeyError, TypeError) as e:
        field = e.args[0] if isinstance(e, KeyError) else "tables"
        logger.error(f"SeaTable: metadata inválida en '{field}'")
        raise ValidationException("SeaTable: Metadata error.", field=str(field)) from e
    logger.debug(f"SeaTable: metadata con {len(parsed.tables)} tablas")
    return replace(ctx, metadata=parsed)


async def request_json(
    executor: RequestExecutor,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    try:
        return await executor.request(method, url, **kwargs)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"SeaTable: {method} {url} falló: {e}")
        raise SeaTableApiException(e, method=method, url=url) from e
