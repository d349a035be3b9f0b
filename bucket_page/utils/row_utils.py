"""
Row manipulation utilities shared by the sample store and the shell.
"""

from typing import Any, Dict, List


def project_fields(row: Dict[str, Any], fields: List[str]) -> Dict[str, Any]:
    """
    Extract specified fields from a row.

    Fields with no stored value are left out, so the renderer shows them
    as null.

    Example:
        row = {'page': 'Foo', 'name': 'Alice', 'age': 30}
        project_fields(row, ['page', 'name']) -> {'page': 'Foo', 'name': 'Alice'}
    """
    return {field: row[field] for field in fields if row.get(field) is not None}


def field_matches(stored: Any, expected: Any, repeated: bool = False) -> bool:
    """
    Check a stored field value against an equality condition.

    A repeated field matches when any of its items equals the expected value.
    """
    if repeated and isinstance(stored, (list, tuple)):
        return expected in stored
    return stored == expected


def row_matches(row: Dict[str, Any], conditions: Dict[str, Any], schema) -> bool:
    """
    Check a row against every equality condition.

    Args:
        row: Stored row
        conditions: Mapping of field name to expected value
        schema: Bucket schema, used to know which fields are repeated
    """
    for field, expected in conditions.items():
        repeated = field in schema and schema[field].repeated
        if not field_matches(row.get(field), expected, repeated):
            return False
    return True
