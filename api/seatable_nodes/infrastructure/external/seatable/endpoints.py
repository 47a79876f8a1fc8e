"""
Expansión de plantillas de endpoint.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

from seatable_nodes.domain.entities.dtable import SeaTableContext

_ENDPOINT_VARIABLE = re.compile(r"({{ *(access_token|dtable_uuid|server) *}})")


def normalize(subject: Optional[str]) -> Optional[str]:
    """Normaliza Unicode (NFC) para que URLs equivalentes sean idénticas."""
    if subject:
        return unicodedata.normalize("NFC", subject)
    return subject


def expand_endpoint(ctx: SeaTableContext, endpoint: Optional[str]) -> str:
    """
    Resuelve {{access_token}}, {{dtable_uuid}} y {{server}}.

    - Un endpoint con "/" inicial se prefija con el servidor.
    - Las variables sin valor (p.ej. sin token aún) quedan tal cual.
    """
    if not endpoint:
        return ""

    token = ctx.app_access_token
    variables = {
        "access_token": token.access_token if token else None,
        "dtable_uuid": token.dtable_uuid if token else None,
        "server": ctx.server,
    }

    endpoint = normalize(endpoint)
    if endpoint.startswith("/"):
        endpoint = f"{variables['server'] or ''}{endpoint}"

    return _ENDPOINT_VARIABLE.sub(
        lambda match: variables[match.group(2)] or match.group(1),
        endpoint,
    )
