"""
Centralized exception hierarchy for bucket pages.

All custom exceptions inherit from BucketError so the special page, the API
proxy and the shell can catch bucket failures with a single except clause.
Formatting code never raises these; they come from query execution.
"""


class BucketError(Exception):
    """Base exception for all bucket errors."""
    pass


class BucketQueryError(BucketError):
    """Raised by the bucket query action when a query cannot be run."""
    pass


class BucketNotFoundError(BucketQueryError):
    """Raised when querying a bucket that does not exist."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        super().__init__(f"Bucket '{bucket_name}' does not exist")


class BucketAlreadyExistsError(BucketError):
    """Raised when creating a bucket that already exists."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        super().__init__(f"Bucket '{bucket_name}' already exists")


class FieldNotFoundError(BucketQueryError):
    """Raised when a query references a field missing from the bucket schema."""

    def __init__(self, field_name: str, bucket_name: str = None):
        self.field_name = field_name
        self.bucket_name = bucket_name
        msg = f"Field '{field_name}' does not exist"
        if bucket_name:
            msg += f" in bucket '{bucket_name}'"
        super().__init__(msg)


class QuerySyntaxError(BucketQueryError):
    """Raised when a select or where clause cannot be parsed."""

    def __init__(self, message: str, clause: str = None):
        self.clause = clause
        msg = f"Query syntax error: {message}"
        if clause:
            msg += f" in '{clause}'"
        super().__init__(msg)


class InvalidLimitError(BucketQueryError):
    """Raised when limit or offset is not a non-negative integer."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name} '{value}': must be a non-negative integer")


class UnknownActionError(BucketError):
    """Raised when the API dispatcher has no handler for an action."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unrecognized value for parameter 'action': {action}")


class SchemaError(BucketError):
    """Raised when a schema document is malformed."""

    def __init__(self, column_name: str, reason: str):
        self.column_name = column_name
        self.reason = reason
        super().__init__(f"Invalid schema for column '{column_name}': {reason}")


class InvalidBucketNameError(BucketError):
    """Raised when a bucket name is invalid."""

    def __init__(self, bucket_name: str, reason: str):
        self.bucket_name = bucket_name
        self.reason = reason
        super().__init__(f"Invalid bucket name '{bucket_name}': {reason}")


class FieldTypeError(BucketError):
    """Raised when a stored value doesn't match its field's declared type."""

    def __init__(self, field_name: str, expected_type: str, actual_value):
        self.field_name = field_name
        self.expected_type = expected_type
        self.actual_value = actual_value
        super().__init__(
            f"Type mismatch for field '{field_name}': "
            f"expected {expected_type}, got {type(actual_value).__name__} ({actual_value})"
        )
