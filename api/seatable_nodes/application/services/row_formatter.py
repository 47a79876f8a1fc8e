"""
Formateo de filas de SeaTable.

Funciones puras (sin I/O) para:
- Parsear la lista libre de columnas adicionales ("Title, Surname").
- Mapear claves internas de columna a nombres visibles.
- Reducir valores a tipos JSON permitidos.
- Filtrar y ordenar filas por timestamp para el trigger.

Ninguna función modifica las filas recibidas; siempre retornan copias.
"""
from __future__ import annotations

import unicodedata
from typing import Any, Iterable, Optional, Sequence

from seatable_nodes.domain.entities.dtable import DtableColumn
from seatable_nodes.shared.constants.seatable_constants import INTERNAL_NAMES
from seatable_nodes.shared.exceptions.domain import ValidationException

Row = dict[str, Any]

_SKIPPED_NAMES = frozenset(("",) + INTERNAL_NAMES)


def column_names_to_list(column_names: Optional[str]) -> list[str]:
    """
    Convierte "A, B\\,C, A" en ["A", "B,C"].

    Reglas:
    - Separa por comas no escapadas; la barra invertida escapa cualquier caracter.
    - Recorta espacios no escapados en los extremos de cada nombre.
    - Descarta vacíos y nombres internos (_id, _ctime, ...).
    - Elimina duplicados conservando el primer orden de aparición.
    """
    if not column_names:
        return []

    text = unicodedata.normalize("NFC", column_names)
    names: list[str] = []
    for name in _split_unescaped_commas(text):
        if name in _SKIPPED_NAMES or name in names:
            continue
        names.append(name)
    return names


def _split_unescaped_commas(text: str) -> list[str]:
    tokens: list[str] = []
    # (caracter, escapado)
    current: list[tuple[str, bool]] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            current.append((text[i + 1], True))
            i += 2
            continue
        if char == ",":
            tokens.append(_strip_token(current))
            current = []
        else:
            current.append((char, False))
        i += 1
    tokens.append(_strip_token(current))
    return tokens


def _strip_token(chars: list[tuple[str, bool]]) -> str:
    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(char for char, _ in chars[start:end])


def row_format_column(value: Any) -> Any:
    """
    Reduce un valor a null, bool, número, string o lista de strings.

    Cualquier otra forma (dict, lista mixta, objetos) se convierte en None.
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def row_format_columns(row: Row, column_names: Sequence[str]) -> Row:
    """Nueva fila con exactamente `column_names`, en ese orden (faltantes -> None)."""
    return {name: row_format_column(row.get(name)) for name in column_names}


def rows_format_columns(rows: Iterable[Row], column_names: Sequence[str]) -> list[Row]:
    return [row_format_columns(row, column_names) for row in rows]


def row_map_columns_from_keys_to_names(row: Row, columns: Sequence[DtableColumn]) -> Row:
    """
    Traduce una fila recién insertada (claves internas de columna) a nombres.

    Los campos internos con valor se copian tal cual y se retiran antes
    de traducir, para que nunca se confundan con una columna de datos.
    Las claves sin columna conocida se descartan.
    """
    out: Row = {}
    remaining = dict(row)
    for name in INTERNAL_NAMES:
        if remaining.get(name):
            out[name] = remaining.pop(name)

    names_by_key = {column.key: column.name for column in columns}
    for key, value in remaining.items():
        if key in names_by_key:
            out[names_by_key[key]] = value
    return out


def row_delete_internal_columns(row: Row) -> Row:
    return {key: value for key, value in row.items() if key not in INTERNAL_NAMES}


def rows_delete_internal_columns(rows: Iterable[Row]) -> list[Row]:
    return [row_delete_internal_columns(row) for row in rows]


def rows_sequence(rows: Sequence[Row]) -> list[Row]:
    """
    Numera las filas (_seq, base 1) en el orden del servidor.

    Si la primera fila ya tiene _seq se asume que todas lo tienen.
    """
    if rows and "_seq" in rows[0]:
        return list(rows)
    return [{**row, "_seq": index} for index, row in enumerate(rows, start=1)]


def rows_time_filter(rows: Sequence[Row], column_name: str, start_date: str) -> list[Row]:
    """
    Conserva las filas cuyo timestamp es estrictamente mayor al cursor.

    La comparación es de strings: ambos lados usan ISO-8601 con
    milisegundos y offset UTC.
    """
    sequenced = rows_sequence(rows)
    return [
        row for row in sequenced
        if isinstance(row.get(column_name), str) and row[column_name] > start_date
    ]


def rows_time_sort(rows: Sequence[Row], column_name: str) -> list[Row]:
    """Orden ascendente estable por timestamp y luego por _seq."""
    sequenced = rows_sequence(rows)

    def sort_key(row: Row) -> tuple[bool, str, int]:
        value = row.get(column_name)
        # filas sin timestamp al final
        return (value is None, "" if value is None else str(value), row.get("_seq") or 0)

    return sorted(sequenced, key=sort_key)


def select_output_columns(columns: Sequence[DtableColumn], requested: Sequence[str]) -> list[str]:
    """
    Columnas de salida: la primera columna de la tabla (siempre) seguida de
    las pedidas que existen en la metadata, sin duplicados.

    Los nombres desconocidos se descartan en silencio.
    """
    if not columns:
        raise ValidationException("SeaTable: Table has no columns.", field="columns")

    existing = {column.name for column in columns}
    selected: list[str] = []
    for name in [columns[0].name, *requested]:
        if name in existing and name not in selected:
            selected.append(name)
    return selected


def rows_search(rows: Iterable[Row], column_name: str, term: str, wildcard: bool = True) -> list[Row]:
    """
    Filtra filas por el valor de una columna.

    - wildcard: substring sin distinguir mayúsculas.
    - exacto: igualdad de strings.
    Las listas coinciden si alguno de sus elementos coincide.
    """
    needle = term.casefold() if wildcard else term

    def matches(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, list):
            return any(matches(item) for item in value)
        text = str(value)
        if wildcard:
            return needle in text.casefold()
        return text == needle

    return [row for row in rows if matches(row.get(column_name))]
