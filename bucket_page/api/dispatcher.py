"""
In-process API dispatch.

Requests are plain parameter sets; the dispatcher routes them by their
"action" parameter to a registered handler and hands back the handler's
result document. Nothing crosses a network boundary.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, Optional

from ..utils.exceptions import InvalidLimitError, UnknownActionError

logger = logging.getLogger(__name__)


class DerivativeRequest(Mapping):
    """
    A request that inherits the parameters of a base request and overrides
    some of them.

    The base may be another DerivativeRequest, a plain mapping, or any
    object with an ``args`` mapping (such as a Flask request). The base is
    kept so handlers can reach the originating request.
    """

    def __init__(self, base: Any = None, params: Optional[Mapping[str, Any]] = None):
        self.base = base
        merged: Dict[str, Any] = dict(_base_params(base))
        merged.update(params or {})
        self._params = merged

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self._params)

    def get_int(self, key: str, default: int = 0) -> int:
        """
        Read a non-negative integer parameter.

        Raises:
            InvalidLimitError: If the value is not a non-negative integer
        """
        value = self._params.get(key)
        if value is None or value == '':
            return default
        if isinstance(value, bool):
            raise InvalidLimitError(key, value)
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidLimitError(key, value)
        if number < 0:
            raise InvalidLimitError(key, value)
        return number

    def __getitem__(self, key: str) -> Any:
        return self._params[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"DerivativeRequest({self._params})"


def _base_params(base: Any) -> Mapping[str, Any]:
    if base is None:
        return {}
    if isinstance(base, Mapping):
        return base
    args = getattr(base, 'args', None)
    if args is not None:
        # MultiDict.items() yields the first value of each key
        return dict(args.items())
    return {}


Handler = Callable[[DerivativeRequest], Dict[str, Any]]


class ApiDispatcher:
    """
    Routes API requests to action handlers.

    Handlers are registered once at start-up. Exceptions raised by a
    handler propagate unchanged to the caller.
    """

    def __init__(self):
        self._handlers: Dict[str, Handler] = {}

    def register(self, action: str, handler: Handler) -> None:
        """Register (or replace) the handler for an action."""
        self._handlers[action] = handler

    def unregister(self, action: str) -> None:
        self._handlers.pop(action, None)

    def has_action(self, action: str) -> bool:
        return action in self._handlers

    def execute(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Execute a request.

        Args:
            request: Request parameters, including "action"

        Returns:
            The handler's result document

        Raises:
            UnknownActionError: If no handler is registered for the action
        """
        if not isinstance(request, DerivativeRequest):
            request = DerivativeRequest(request)

        action = request.get('action')
        if action not in self._handlers:
            raise UnknownActionError(action)

        logger.debug("Dispatching action %s with %s", action, request.params)
        return self._handlers[action](request)


default_dispatcher = ApiDispatcher()
