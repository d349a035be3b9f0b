"""
Cell value shapes.

Raw row values arrive as strings, lists, JSON-encoded arrays, numbers,
booleans or nothing at all. decode_value settles the shape once, at the
boundary, so the formatter only ever sees one of three cases.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    """A single value."""
    value: Any


@dataclass(frozen=True)
class Sequence:
    """The values of a repeated column, in stored order."""
    items: Tuple[Any, ...] = ()

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)


@dataclass(frozen=True)
class Null:
    """No value stored for this cell."""


CellValue = Union[Scalar, Sequence, Null]

NULL = Null()


def decode_value(raw: Any, repeated: bool) -> CellValue:
    """
    Decide the shape of a raw row value.

    Args:
        raw: Value as found in the result row
        repeated: Whether the column holds a list of values

    Returns:
        Null for None. For repeated columns a Sequence: lists and tuples are
        taken as-is, strings are JSON-decoded, and anything that does not
        decode to a list becomes a one-element sequence. Otherwise a Scalar.
    """
    if isinstance(raw, (Scalar, Sequence, Null)):
        return raw
    if raw is None:
        return NULL
    if not repeated:
        return Scalar(raw)

    if isinstance(raw, (list, tuple)):
        return Sequence(tuple(raw))
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            return Sequence((raw,))
        if isinstance(decoded, list):
            return Sequence(tuple(decoded))
        if decoded is None:
            return Sequence()
        return Sequence((decoded,))
    return Sequence((raw,))


def decode_row(row: Dict[str, Any], schema) -> Dict[str, CellValue]:
    """
    Decode every schema column of a row.

    Columns absent from the row come back as Null.
    """
    return {
        column.name: decode_value(row.get(column.name), column.repeated)
        for column in schema
    }
