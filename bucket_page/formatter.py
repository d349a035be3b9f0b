"""
Result formatter for displaying bucket query results.

Separates presentation logic from query execution: everything here is a pure
function of its inputs and never raises for bad data.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from tabulate import tabulate

from .schema.types import DataType, Schema, type_name
from .schema.values import Null, Sequence, decode_value
from .utils.escaping import TextEscaper, escape_wiki_text

NULL_CELL = "<td>''Null''</td>"


def _is_truthy(value: Any) -> bool:
    # "0" is false in stored bucket data, as is the empty string
    if isinstance(value, str):
        return value not in ('', '0')
    return bool(value)


def _to_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return str(value)


def format_value(
    value: Any,
    data_type: Union[DataType, str],
    repeated: bool,
    escaper: TextEscaper = escape_wiki_text
) -> str:
    """
    Format a single cell value as wikitext according to its declared type.

    Args:
        value: Raw value, or an already decoded Scalar/Sequence/Null
        data_type: Declared column type
        repeated: Whether the column holds a list of values
        escaper: Escaping function applied to untrusted text

    Returns:
        - Repeated columns: one <li class="bucket-list"> per non-empty item
        - PAGE: [[:Title]] link, or "" for an empty title
        - TEXT: escaped text
        - BOOLEAN: "True" or "False"
        - Other types: the value unmodified
    """
    cell = decode_value(value, repeated)

    if isinstance(cell, Null):
        return ''

    if isinstance(cell, Sequence):
        items = []
        for item in cell:
            formatted = format_value(item, data_type, False, escaper)
            if formatted != '':
                items.append('<li class="bucket-list">' + formatted)
        return ''.join(items)

    raw = cell.value
    name = type_name(data_type)

    if name == DataType.PAGE.value:
        text = _to_text(raw)
        if len(text) > 0:
            return '[[:' + escaper(text) + ']]'
        return ''
    if name == DataType.TEXT.value:
        return escaper(_to_text(raw))
    if name == DataType.BOOLEAN.value:
        return 'True' if _is_truthy(raw) else 'False'
    # Other types are numeric or otherwise trusted
    return _to_text(raw)


def get_result_table(
    schema: Union[Schema, Dict[str, Any]],
    fields: Optional[Iterable[str]],
    result: Iterable[Dict[str, Any]],
    escaper: TextEscaper = escape_wiki_text
) -> str:
    """
    Format query result rows as a wikitext table.

    Columns follow schema order, restricted to the selected fields. Column
    names are schema identifiers and are not escaped.

    Args:
        schema: Bucket schema, as a Schema or the API's schema document
        fields: Selected field names; None or empty renders nothing
        result: Result rows keyed by column name
        escaper: Escaping function applied to untrusted text

    Returns:
        Table markup, or "" when no fields are selected
    """
    if not fields:
        return ''

    columns = Schema.from_dict(schema).select(fields)

    output = ['<table class="wikitable"><tr>']
    for column in columns:
        output.append(f"<th>{column.name}</th>")

    for row in result:
        output.append('<tr>')
        for column in columns:
            value = row.get(column.name)
            if value is not None:
                output.append('<td>' + format_value(
                    value, column.type_name, column.repeated, escaper) + '</td>')
            else:
                output.append(NULL_CELL)
        output.append('</tr>')

    output.append('</table>')
    return ''.join(output)


def print_error(message: str, escaper: TextEscaper = escape_wiki_text) -> str:
    """Escapes input and wraps it in the standard error format."""
    return '<strong class="error bucket-error">' + escaper(message) + '</strong>'


def _plain_value(value: Any, repeated: bool) -> Any:
    cell = decode_value(value, repeated)
    if isinstance(cell, Null):
        return 'NULL'
    if isinstance(cell, Sequence):
        return ', '.join(_to_text(item) for item in cell)
    return cell.value


def format_text_table(
    schema: Union[Schema, Dict[str, Any]],
    fields: Optional[Iterable[str]],
    result: List[Dict[str, Any]]
) -> str:
    """
    Format query result rows as an ASCII table for terminals.

    Args:
        schema: Bucket schema
        fields: Selected field names
        result: Result rows

    Returns:
        Formatted string with table and row count
    """
    columns = Schema.from_dict(schema).select(fields)
    if not columns or not result:
        return "(0 rows)"

    values = []
    for row in result:
        values.append([_plain_value(row.get(c.name), c.repeated) for c in columns])

    table = tabulate(values, headers=[c.name for c in columns], tablefmt='grid')
    row_count = f"\n({len(result)} row{'s' if len(result) != 1 else ''})"

    return table + row_count
