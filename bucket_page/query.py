"""
Bucket query invocation.

run_query proxies a query to the "bucket" API action in the same process and
hands back its result document. It does not validate or reinterpret
anything: errors from the query action reach the caller unchanged.
"""

import logging
from typing import Any, Dict, List, Optional

from .api.dispatcher import ApiDispatcher, DerivativeRequest, default_dispatcher
from .schema.types import Schema

logger = logging.getLogger(__name__)


class QueryResult:
    """Result document of a bucket query, with accessors for its parts."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data or {}

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return self.data.get('bucket') or []

    @property
    def schema(self) -> Schema:
        return Schema.from_dict(self.data.get('schema'))

    @property
    def fields(self) -> List[str]:
        """Selected fields, falling back to every schema column."""
        fields = self.data.get('fields')
        if fields is None:
            return self.schema.column_order
        return list(fields)

    @property
    def has_next(self) -> bool:
        return bool(self.data.get('hasNext', False))

    @property
    def error(self) -> Optional[str]:
        return self.data.get('error')

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        if not self.ok:
            return f"QueryResult(error={self.error!r})"
        return f"QueryResult({len(self.rows)} rows)"


def run_query(
    request: Any,
    bucket: str,
    select: str,
    where: str,
    limit: int,
    offset: int,
    dispatcher: Optional[ApiDispatcher] = None
) -> QueryResult:
    """
    Run a query through the bucket API action.

    Args:
        request: Originating request; its parameters are inherited
        bucket: Bucket name
        select: Select clause, passed through untouched
        where: Where clause, passed through untouched
        limit: Page size
        offset: Rows to skip
        dispatcher: API dispatcher (defaults to the process-wide one)

    Returns:
        QueryResult wrapping the action's result document
    """
    params = DerivativeRequest(request, {
        'action': 'bucket',
        'bucket': bucket,
        'select': select,
        'where': where,
        'limit': limit,
        'offset': offset
    })
    dispatcher = dispatcher or default_dispatcher

    logger.debug("Running query on bucket %s (limit=%s, offset=%s)", bucket, limit, offset)
    return QueryResult(dispatcher.execute(params))
