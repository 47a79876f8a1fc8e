"""
Tests de carga y validación de parámetros de los nodos.
"""
import pytest

from seatable_nodes.application.dto import (
    ListParametersDTO,
    RowParametersDTO,
    SearchParametersDTO,
    TriggerParametersDTO,
    UpdateParametersDTO,
    load_parameters,
)
from seatable_nodes.infrastructure.host.local_host import MappingParameterSource
from seatable_nodes.shared.constants.seatable_constants import TriggerOperation
from seatable_nodes.shared.exceptions.domain import ValidationException


def test_list_defaults():
    params = load_parameters(ListParametersDTO, MappingParameterSource({"table": "Contacts"}))
    assert params.return_all is True
    assert params.limit == 100
    assert params.column_names == ""


def test_none_values_take_defaults():
    source = MappingParameterSource({"table": "Contacts", "limit": None, "column_names": None})
    params = load_parameters(ListParametersDTO, source)
    assert params.limit == 100
    assert params.column_names == ""


def test_numeric_row_id_and_search_term_become_strings():
    row = load_parameters(RowParametersDTO, MappingParameterSource({"table": "T", "row_id": 7}))
    search = load_parameters(
        SearchParametersDTO,
        MappingParameterSource({"table": "T", "search_column": "Age", "search_term": 30}),
    )
    assert row.row_id == "7"
    assert search.search_term == "30"


def test_overrides_win_over_source():
    source = MappingParameterSource({"table": "T", "row_id": "r1", "row": {"A": 1}})
    params = load_parameters(UpdateParametersDTO, source, overrides={"row": {"B": 2}})
    assert params.row == {"B": 2}


def test_per_item_index():
    source = MappingParameterSource({"table": "T"}, per_item=[{"row_id": "a"}, {"row_id": "b"}])
    assert load_parameters(RowParametersDTO, source, 1).row_id == "b"


def test_trigger_operation():
    params = load_parameters(
        TriggerParametersDTO, MappingParameterSource({"table": "T", "operation": "update"})
    )
    assert params.operation is TriggerOperation.UPDATE
    assert params.operation.column == "_mtime"
    assert TriggerOperation.CREATE.column == "_ctime"


@pytest.mark.parametrize(
    "parameters, field",
    [
        ({}, "table"),
        ({"table": ""}, "table"),
        ({"table": "T", "limit": 0}, "limit"),
        ({"table": "T", "return_all": "maybe"}, "return_all"),
    ],
)
def test_invalid_parameters(parameters, field):
    with pytest.raises(ValidationException) as exc_info:
        load_parameters(ListParametersDTO, MappingParameterSource(parameters))
    assert exc_info.value.details == {"field": field}
    assert exc_info.value.message.startswith(f'Invalid parameter "{field}"')
