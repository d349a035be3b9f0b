"""
Reusable validation functions for bucket names and stored values.

Used by the sample store when buckets are created and rows inserted. The
formatter never validates: it renders whatever the query action returns.
"""

import re
from typing import Any

from .exceptions import FieldTypeError, InvalidBucketNameError, SchemaError


def normalize_bucket_name(name: str) -> str:
    """
    Normalise a bucket name the way the wiki stores it.

    Surrounding whitespace is trimmed, inner spaces become underscores and
    the name is lower-cased.
    """
    return name.strip().replace(' ', '_').lower()


def validate_bucket_name(name: str) -> bool:
    """
    Validates a normalised bucket name.

    Rules:
    - Must not be empty
    - Must be at most 255 characters
    - May only contain lower-case letters, digits and underscores
    - Must not start with an underscore

    Raises:
        InvalidBucketNameError: If the name is invalid
    """
    if not name:
        raise InvalidBucketNameError(name, "Bucket name cannot be empty")

    if len(name) > 255:
        raise InvalidBucketNameError(name, "Bucket name too long (max 255 characters)")

    if not re.match(r'^[a-z0-9][a-z0-9_]*$', name):
        raise InvalidBucketNameError(
            name,
            "Must start with a letter or digit, and contain only lower-case letters, digits and underscores"
        )

    return True


def validate_field_name(name: str) -> bool:
    """
    Validates a field (column) name.

    Field names are rendered into table headers as-is, so only lower-case
    letters, digits and underscores are allowed.

    Raises:
        SchemaError: If the name is invalid
    """
    if not name:
        raise SchemaError(name, "Column name cannot be empty")

    if len(name) > 255:
        raise SchemaError(name, "Column name too long (max 255 characters)")

    if not re.match(r'^[a-z0-9_]+$', name):
        raise SchemaError(name, "Column name may only contain lower-case letters, digits and underscores")

    return True


def validate_value_for_type(value: Any, data_type: str, field_name: str = '') -> bool:
    """
    Validates that a single (non-repeated) value matches a declared type.

    Unknown types accept any value; None is always accepted.

    Raises:
        FieldTypeError: If value doesn't match the expected type
    """
    if value is None:
        return True

    data_type = data_type.upper()

    if data_type == 'INTEGER':
        if not isinstance(value, int) or isinstance(value, bool):
            raise FieldTypeError(field_name, data_type, value)

    elif data_type == 'DOUBLE':
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise FieldTypeError(field_name, data_type, value)

    elif data_type == 'BOOLEAN':
        if not isinstance(value, bool):
            raise FieldTypeError(field_name, data_type, value)

    elif data_type in ('TEXT', 'PAGE'):
        if not isinstance(value, str):
            raise FieldTypeError(field_name, data_type, value)

    return True


def validate_value_for_column(value: Any, column) -> bool:
    """
    Validates a value against a Column, including repeated columns.

    Repeated columns take a list; each item is checked against the type.
    """
    if value is None:
        return True
    if column.repeated:
        if not isinstance(value, (list, tuple)):
            raise FieldTypeError(column.name, f"{column.type_name}[]", value)
        for item in value:
            validate_value_for_type(item, column.type_name, column.name)
        return True
    return validate_value_for_type(value, column.type_name, column.name)
