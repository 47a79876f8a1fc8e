"""
DTOs de parámetros de los nodos.
Validan lo que entrega el host antes de llamar a SeaTable.
"""
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from seatable_nodes.application.interfaces.host import ParameterSource
from seatable_nodes.shared.constants.seatable_constants import TriggerOperation
from seatable_nodes.shared.exceptions.domain import ValidationException


class TableParametersDTO(BaseModel):
    """Parámetro común: tabla sobre la que opera el nodo."""
    table: str = Field(..., min_length=1, description="Nombre de la tabla SeaTable")


class ListParametersDTO(TableParametersDTO):
    return_all: bool = Field(True, description="Traer todas las filas o solo `limit`")
    limit: int = Field(100, ge=1, le=100, description="Filas a devolver si return_all es False")
    column_names: str = Field("", description="Columnas adicionales separadas por coma")


class RowParametersDTO(TableParametersDTO):
    """Operaciones sobre una fila identificada por su _id."""
    row_id: str = Field(..., min_length=1)
    column_names: str = ""

    @field_validator("row_id", mode="before")
    @classmethod
    def _row_id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CreateParametersDTO(TableParametersDTO):
    row: Optional[dict[str, Any]] = Field(None, description="Datos de la fila; por defecto el item")


class UpdateParametersDTO(RowParametersDTO):
    row: dict[str, Any] = Field(..., description="Columnas a actualizar")


class SearchParametersDTO(TableParametersDTO):
    search_column: str = Field(..., min_length=1)
    search_term: str = Field(...)
    wildcard: bool = Field(True, description="Substring sin mayúsculas en vez de igualdad")
    column_names: str = ""

    @field_validator("search_term", mode="before")
    @classmethod
    def _term_as_string(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class TriggerParametersDTO(TableParametersDTO):
    operation: TriggerOperation = TriggerOperation.CREATE
    column_names: str = ""


DTO = TypeVar("DTO", bound=BaseModel)


def load_parameters(
    dto_class: Type[DTO],
    source: ParameterSource,
    index: int = 0,
    overrides: Optional[dict[str, Any]] = None,
) -> DTO:
    """
    Lee del host los campos declarados en `dto_class` y los valida.

    Los parámetros ausentes (None) toman el default del DTO.

    Raises:
        ValidationException: si falta un parámetro obligatorio o es inválido
    """
    values: dict[str, Any] = {}
    for name in dto_class.model_fields:
        value = source.get(name, index)
        if value is not None:
            values[name] = value
    values.update(overrides or {})

    try:
        return dto_class(**values)
    except ValidationError as e:
        first = e.errors()[0]
        field: Union[str, int] = first["loc"][0] if first.get("loc") else ""
        raise ValidationException(
            f'Invalid parameter "{field}": {first.get("msg")}',
            field=str(field),
        ) from e
