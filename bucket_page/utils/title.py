"""
Page titles and local URL construction.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

DEFAULT_SCRIPT_PATH = "/index.php"
DEFAULT_ARTICLE_PATH = "/wiki/"

# Characters the wiki leaves unencoded in page names
_TITLE_SAFE_CHARS = ';@$!*(),/~:'


class Title:
    """
    A wiki page identity that can build links to itself.

    The title text is normalised the way the wiki stores it: surrounding
    whitespace trimmed, spaces replaced by underscores, first letter
    upper-cased.
    """

    def __init__(self, text: str, script_path: str = DEFAULT_SCRIPT_PATH):
        text = text.strip().replace(' ', '_')
        self.db_key = text[:1].upper() + text[1:]
        self.script_path = script_path

    @property
    def text(self) -> str:
        """Title as displayed, with spaces."""
        return self.db_key.replace('_', ' ')

    def get_local_url(self, query: Optional[Dict[str, Any]] = None) -> str:
        """
        Build a site-relative URL to this page.

        Args:
            query: Query parameters in order. None and False values are
                dropped, True becomes "1".

        Returns:
            URL such as /index.php?title=Special:Bucket&limit=20&offset=0
        """
        url = f"{self.script_path}?title={quote(self.db_key, safe=_TITLE_SAFE_CHARS)}"
        params = []
        for key, value in (query or {}).items():
            if value is None or value is False:
                continue
            if value is True:
                value = 1
            params.append((key, value))
        if params:
            url += '&' + urlencode(params)
        return url

    def get_article_path(self, article_path: str = DEFAULT_ARTICLE_PATH) -> str:
        """Short article URL, e.g. /wiki/Iron_ore."""
        return article_path + quote(self.db_key, safe=_TITLE_SAFE_CHARS)

    def __eq__(self, other) -> bool:
        return isinstance(other, Title) and self.db_key == other.db_key

    def __hash__(self) -> int:
        return hash(self.db_key)

    def __repr__(self) -> str:
        return f"Title({self.text})"
