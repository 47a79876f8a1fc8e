"""
Constantes del API de SeaTable.
Define tamano de pagina, columnas internas, tipos de columna y endpoints.
"""
from enum import Enum


# Tamano fijo de pagina para el listado de filas
ROW_FETCH_SEGMENT_LIMIT = 1000

# Campos internos de una fila; nunca se tratan como columnas de usuario
INTERNAL_NAMES = ("_id", "_creator", "_ctime", "_last_modifier", "_mtime", "_seq")

# Tipos de columna soportados -> nombre legible
COLUMN_TYPES = {
    "text": "Text",
    "long-text": "Long Text",
    "number": "Number",
    "collaborator": "Collaborator",
    "date": "Date",
    "duration": "Duration",
    "single-select": "Single Select",
    "multiple-select": "Multiple Select",
    "email": "Email",
    "url": "URL",
    "rate": "Rating",
    "checkbox": "Checkbox",
    "formula": "Formula",
    "creator": "Creator",
    "ctime": "Created time",
    "last-modifier": "Last Modifier",
    "mtime": "Last modified time",
    "auto-number": "Auto number",
}

# Ventana hacia atras para ejecuciones manuales del trigger
MANUAL_LOOKBACK_MINUTES = 2

# Formato del cursor: ISO-8601 con milisegundos y offset UTC
CURSOR_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Endpoints (las plantillas con "/" inicial se prefijan con el servidor)
APP_ACCESS_TOKEN_ENDPOINT = "/api/v2.1/dtable/app-access-token/"
METADATA_ENDPOINT = "/dtable-server/api/v1/dtables/{{dtable_uuid}}/metadata/"
ROWS_ENDPOINT = "/dtable-server/api/v1/dtables/{{dtable_uuid}}/rows/"
LOCK_ROWS_ENDPOINT = "/dtable-server/api/v1/dtables/{{dtable_uuid}}/lock-rows/"
UNLOCK_ROWS_ENDPOINT = "/dtable-server/api/v1/dtables/{{dtable_uuid}}/unlock-rows/"


class ActionOperation(str, Enum):
    """Operaciones del nodo de accion."""
    APPEND = "append"
    CREATE = "create"
    GET = "get"
    LIST = "list"
    LOCK = "lock"
    METADATA = "metadata"
    REMOVE = "remove"
    SEARCH = "search"
    UNLOCK = "unlock"
    UPDATE = "update"


class TriggerOperation(str, Enum):
    """Eventos que detecta el trigger."""
    CREATE = "create"
    UPDATE = "update"

    @property
    def column(self) -> str:
        """Columna de timestamp asociada al evento."""
        return "_ctime" if self is TriggerOperation.CREATE else "_mtime"


class ExecutionMode(str, Enum):
    """Modo en el que el host invoca el nodo."""
    MANUAL = "manual"
    TRIGGER = "trigger"
