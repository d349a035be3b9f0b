"""
Bucket column type definitions.

The Column class is the single source of truth for column metadata, used by
the formatter, the sample store and the shell. A Schema keeps columns in
declaration order, which is also the order tables are rendered in.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Union
from enum import Enum

from ..utils.exceptions import SchemaError
from ..utils.validators import validate_field_name


class DataType(Enum):
    """Column data types declared by bucket schemas."""
    PAGE = "PAGE"
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    DOUBLE = "DOUBLE"
    BOOLEAN = "BOOLEAN"

    @classmethod
    def from_string(cls, type_str: str) -> Optional['DataType']:
        """
        Convert string representation to DataType enum.

        Returns None for type names this package does not know; such
        columns are still rendered, just without type-specific formatting.
        """
        type_str = type_str.upper()
        # Handle aliases
        if type_str == 'INT':
            return cls.INTEGER
        elif type_str in ('FLOAT', 'REAL'):
            return cls.DOUBLE
        elif type_str == 'BOOL':
            return cls.BOOLEAN
        return cls.__members__.get(type_str)


def type_name(data_type: Union[DataType, str, None]) -> str:
    """
    Normalise a DataType or declared type string to its canonical name.

    Aliases resolve to the type they stand for ("bool" is "BOOLEAN");
    unknown names are upper-cased and kept.
    """
    if isinstance(data_type, DataType):
        return data_type.value
    if data_type is None:
        return ''
    name = str(data_type).upper()
    known = DataType.from_string(name)
    return known.value if known else name


class Column:
    """
    Represents a bucket column: a name, a declared type and whether it holds
    a list of values per row.
    """

    def __init__(self, name: str, data_type: Union[DataType, str], repeated: bool = False):
        validate_field_name(name)
        self.name = name
        self.type_name = type_name(data_type)
        if not self.type_name:
            raise SchemaError(name, "Column type cannot be empty")
        self.data_type = DataType.from_string(self.type_name)
        self.repeated = bool(repeated)

    def to_dict(self) -> dict:
        """Serialize column to the API's schema document form."""
        return {'type': self.type_name, 'repeated': self.repeated}

    @classmethod
    def from_dict(cls, name: str, data: Any) -> 'Column':
        """Deserialize column from its schema document entry."""
        if not isinstance(data, dict):
            raise SchemaError(name, "Column definition must be an object")
        if 'type' not in data:
            raise SchemaError(name, "Column definition has no type")
        return cls(name, data['type'], data.get('repeated', False))

    def __eq__(self, other) -> bool:
        return (isinstance(other, Column) and self.name == other.name
                and self.type_name == other.type_name and self.repeated == other.repeated)

    def __repr__(self) -> str:
        if self.repeated:
            return f"Column({self.name}, {self.type_name}[])"
        return f"Column({self.name}, {self.type_name})"


class Schema:
    """
    Ordered collection of columns for one bucket.

    Schemas are built once per query and never mutated while rendering.
    """

    def __init__(self, columns: Iterable[Column] = ()):
        self._columns: Dict[str, Column] = {}
        for column in columns:
            if column.name in self._columns:
                raise SchemaError(column.name, "Duplicate column")
            self._columns[column.name] = column

    @classmethod
    def from_dict(cls, data: Union['Schema', Dict[str, Any], None]) -> 'Schema':
        """
        Build a schema from the API's {name: {"type": ..., "repeated": ...}}
        document. A Schema is returned as-is.
        """
        if isinstance(data, Schema):
            return data
        if data is None:
            return cls()
        return cls(Column.from_dict(name, definition) for name, definition in data.items())

    def to_dict(self) -> Dict[str, dict]:
        return {name: column.to_dict() for name, column in self._columns.items()}

    @property
    def column_order(self) -> List[str]:
        return list(self._columns.keys())

    def select(self, fields: Optional[Iterable[str]]) -> List[Column]:
        """
        Columns that are also in fields, in schema order.

        Field names missing from the schema are ignored.
        """
        if not fields:
            return []
        wanted = set(fields)
        return [column for name, column in self._columns.items() if name in wanted]

    def __getitem__(self, name: str) -> Column:
        return self._columns[name]

    def __contains__(self, name: str) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns.values())

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"Schema({', '.join(repr(c) for c in self)})"
