"""
Message lookup for user-facing labels.

Labels and tooltips are resolved by key so a host can swap in its own
translations. Parameters are substituted positionally into $1, $2, ...
"""

import re
from typing import Dict, Optional

DEFAULT_MESSAGES: Dict[str, str] = {
    'bucket-previous': 'Previous',
    'bucket-next': 'Next',
    'bucket-previous-results': 'See previous $1 results',
    'bucket-next-results': 'See next $1 results',
    'bucket-special-title': 'Bucket query',
    'bucket-special-bucket': 'Bucket',
    'bucket-special-select': 'Select',
    'bucket-special-where': 'Where',
    'bucket-special-submit': 'Run query',
    'bucket-special-no-bucket': 'Choose a bucket to query.',
    'bucket-special-no-results': 'No results.',
}

_PARAM_RE = re.compile(r'\$(\d+)')


class MessageResolver:
    """
    Resolves message keys to text.

    Unknown keys render as ⧼key⧽ so a missing translation is visible on the
    page instead of raising.
    """

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self._messages = dict(DEFAULT_MESSAGES)
        if messages:
            self._messages.update(messages)

    def has(self, key: str) -> bool:
        """Check if a message key is defined."""
        return key in self._messages

    def get(self, key: str, *params) -> str:
        """
        Look up a message and substitute its parameters.

        Args:
            key: Message key
            *params: Values for $1, $2, ...

        Returns:
            Message text
        """
        if key not in self._messages:
            return f'⧼{key}⧽'

        def substitute(match):
            index = int(match.group(1)) - 1
            if 0 <= index < len(params):
                return str(params[index])
            return match.group(0)

        return _PARAM_RE.sub(substitute, self._messages[key])

    def __call__(self, key: str, *params) -> str:
        return self.get(key, *params)
