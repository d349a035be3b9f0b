"""
In-memory bucket store and the "bucket" query action.

The store backs the demo special page, the interactive shell and the tests.
It understands only field projection and exact-match filters:

- select: "*" or a comma-separated list of field names
- where:  "" or a JSON object of field -> value; a repeated field matches
          when the value is one of its items
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from .dispatcher import ApiDispatcher, DerivativeRequest
from ..schema.types import Schema
from ..utils.exceptions import (
    BucketAlreadyExistsError,
    BucketError,
    BucketNotFoundError,
    FieldNotFoundError,
    QuerySyntaxError,
)
from ..utils.row_utils import project_fields, row_matches
from ..utils.validators import (
    normalize_bucket_name,
    validate_bucket_name,
    validate_value_for_column,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 500


class Bucket:
    """A named collection of rows sharing one schema."""

    def __init__(self, name: str, schema: Schema):
        self.name = name
        self.schema = schema
        self._rows: List[Dict[str, Any]] = []

    def insert(self, row: Dict[str, Any]) -> None:
        """
        Insert a row.

        Raises:
            FieldNotFoundError: If the row has a field the schema lacks
            FieldTypeError: If a value doesn't match its field's type
        """
        for field, value in row.items():
            if field not in self.schema:
                raise FieldNotFoundError(field, self.name)
            validate_value_for_column(value, self.schema[field])
        self._rows.append(dict(row))

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return list(self._rows)

    def row_count(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Bucket({self.name}, {len(self.schema)} fields, {len(self._rows)} rows)"


class BucketStore:
    """
    Holds buckets by normalised name and answers queries against them.

    Does NOT format results; it returns the same document shape the real
    query action does.
    """

    def __init__(self):
        self._buckets: Dict[str, Bucket] = {}

    def create_bucket(self, name: str, schema: Any) -> Bucket:
        """
        Create a bucket.

        Args:
            name: Bucket name (normalised before use)
            schema: Schema or schema document

        Raises:
            BucketAlreadyExistsError: If the bucket exists
            InvalidBucketNameError: If the name is invalid
        """
        name = normalize_bucket_name(name)
        validate_bucket_name(name)
        if name in self._buckets:
            raise BucketAlreadyExistsError(name)

        bucket = Bucket(name, Schema.from_dict(schema))
        self._buckets[name] = bucket
        return bucket

    def drop_bucket(self, name: str) -> None:
        name = normalize_bucket_name(name)
        if name not in self._buckets:
            raise BucketNotFoundError(name)
        del self._buckets[name]

    def get_bucket(self, name: str) -> Bucket:
        normalized = normalize_bucket_name(name or '')
        if normalized not in self._buckets:
            raise BucketNotFoundError(name)
        return self._buckets[normalized]

    def has_bucket(self, name: str) -> bool:
        return normalize_bucket_name(name or '') in self._buckets

    def list_buckets(self) -> List[str]:
        return list(self._buckets.keys())

    def insert(self, name: str, rows: Iterable[Dict[str, Any]]) -> int:
        """Insert rows into a bucket; returns the number inserted."""
        bucket = self.get_bucket(name)
        count = 0
        for row in rows:
            bucket.insert(row)
            count += 1
        return count

    def load_dict(self, data: Dict[str, Any]) -> None:
        """
        Load buckets from a fixture document:
        {"bucket_name": {"schema": {...}, "rows": [...]}, ...}
        """
        if not isinstance(data, dict):
            raise BucketError("Bucket fixture must be an object of bucket definitions")
        for name, definition in data.items():
            if not isinstance(definition, dict):
                raise BucketError(f"Definition of bucket '{name}' must be an object")
            bucket = self.create_bucket(name, definition.get('schema', {}))
            self.insert(bucket.name, definition.get('rows', []))
            logger.debug("Loaded bucket %s", bucket)

    def load_json(self, path: str) -> None:
        """Load buckets from a JSON fixture file."""
        with open(path, encoding='utf-8') as f:
            self.load_dict(json.load(f))

    def handle_query(self, request: DerivativeRequest) -> Dict[str, Any]:
        """
        The "bucket" API action.

        Raises:
            BucketNotFoundError: Unknown bucket
            FieldNotFoundError: select or where names a missing field
            QuerySyntaxError: where is not a JSON object
            InvalidLimitError: limit/offset not a non-negative integer
        """
        name = request.get('bucket') or ''
        if not name.strip():
            raise QuerySyntaxError("no bucket specified")
        bucket = self.get_bucket(name)

        select = request.get('select') or '*'
        where = request.get('where') or ''
        fields = _parse_select(select, bucket)
        conditions = _parse_where(where, bucket)
        limit = min(request.get_int('limit', DEFAULT_LIMIT), MAX_LIMIT)
        offset = request.get_int('offset', 0)

        matched = [row for row in bucket.rows if row_matches(row, conditions, bucket.schema)]
        page = [project_fields(row, fields) for row in matched[offset:offset + limit]]

        logger.debug("Bucket %s matched %d rows, returning %d", bucket.name, len(matched), len(page))
        return {
            'bucketQuery': _describe(bucket.name, fields, where, limit, offset),
            'bucket': page,
            'schema': bucket.schema.to_dict(),
            'fields': fields,
            'hasNext': offset + limit < len(matched),
        }


def _parse_select(select: str, bucket: Bucket) -> List[str]:
    select = select.strip()
    if select in ('', '*'):
        return bucket.schema.column_order

    fields = []
    for part in select.split(','):
        field = part.strip()
        if not field:
            raise QuerySyntaxError("empty field name", select)
        if field not in bucket.schema:
            raise FieldNotFoundError(field, bucket.name)
        if field not in fields:
            fields.append(field)
    return fields


def _parse_where(where: str, bucket: Bucket) -> Dict[str, Any]:
    if not where.strip():
        return {}
    try:
        conditions = json.loads(where)
    except json.JSONDecodeError as e:
        raise QuerySyntaxError(f"invalid JSON ({e.msg})", where)
    if not isinstance(conditions, dict):
        raise QuerySyntaxError("condition must be a JSON object", where)

    for field in conditions:
        if field not in bucket.schema:
            raise FieldNotFoundError(field, bucket.name)
    return conditions


def _describe(name: str, fields: List[str], where: str, limit: int, offset: int) -> str:
    query = f"bucket('{name}').select({', '.join(repr(f) for f in fields)})"
    if where.strip():
        query += f".where({where.strip()})"
    return query + f".limit({limit}).offset({offset})"


def register_store(dispatcher: ApiDispatcher, store: Optional[BucketStore] = None) -> BucketStore:
    """Register a store's query handler as the dispatcher's "bucket" action."""
    store = store or BucketStore()
    dispatcher.register('bucket', store.handle_query)
    return store

