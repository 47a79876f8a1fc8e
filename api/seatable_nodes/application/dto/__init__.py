"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .node_dto import (
    CreateParametersDTO,
    ListParametersDTO,
    RowParametersDTO,
    SearchParametersDTO,
    TableParametersDTO,
    TriggerParametersDTO,
    UpdateParametersDTO,
    load_parameters,
)
