"""
Wikitext escaping shared by every renderer.

escape_wiki_text is the single source of truth for neutralising untrusted
text before it is embedded in wikitext. It mirrors the wiki's own escaping
primitive: markup characters become numeric entities and line-start,
magic-link and signature syntax is broken up so the parser treats it as
literal text.
"""

import re
from typing import Any, Callable, Dict

# Anything that takes text and returns it safe for embedding in markup
TextEscaper = Callable[[Any], str]

MAGIC_LINKS = ('ISBN', 'PMID', 'RFC')

# URL schemes that do not use "://" and would otherwise autolink
COLON_PROTOCOLS = ('bitcoin', 'geo', 'magnet', 'mailto', 'matrix', 'news', 'sip',
                   'sips', 'sms', 'tel', 'urn', 'xmpp')


def _build_replacements() -> Dict[str, str]:
    repl = {
        '"': '&#34;', '&': '&#38;', "'": '&#39;', '<': '&#60;',
        '=': '&#61;', '>': '&#62;', '[': '&#91;', ']': '&#93;',
        '{': '&#123;', '|': '&#124;', '}': '&#125;',
        ';': '&#59;',
        '!!': '&#33;!',
        '\n!': '\n&#33;', '\r!': '\r&#33;',
        '\n#': '\n&#35;', '\r#': '\r&#35;',
        '\n*': '\n&#42;', '\r*': '\r&#42;',
        '\n:': '\n&#58;', '\r:': '\r&#58;',
        '\n ': '\n&#32;', '\r ': '\r&#32;',
        '\n\n': '\n&#10;', '\r\n': '&#13;\n',
        '\n\r': '\n&#13;', '\r\r': '\r&#13;',
        '\n\t': '\n&#9;', '\r\t': '\r&#9;',
        '\n----': '\n&#45;---', '\r----': '\r&#45;---',
        '__': '_&#95;', '://': '&#58;//',
        '~~~': '~~&#126;',
    }
    for magic in MAGIC_LINKS:
        repl[f'{magic} '] = f'{magic}&#32;'
        repl[f'{magic}\t'] = f'{magic}&#9;'
        repl[f'{magic}\r'] = f'{magic}&#13;'
        repl[f'{magic}\n'] = f'{magic}&#10;'
        repl[f'{magic}\f'] = f'{magic}&#12;'
    return repl


_REPLACEMENTS = _build_replacements()

# Longest key first so multi-character tokens win over single characters
_TOKEN_RE = re.compile('|'.join(
    re.escape(key) for key in sorted(_REPLACEMENTS, key=len, reverse=True)
))
_PROTOCOL_RE = re.compile(r'\b(' + '|'.join(COLON_PROTOCOLS) + r'):', re.IGNORECASE)


def escape_wiki_text(text: Any) -> str:
    """
    Escape a value so it renders as literal text inside wikitext.

    The replacement is a single left-to-right pass, so entities produced by
    one substitution are never escaped again. A newline is prepended while
    replacing so that line-start syntax on the first line is caught too.

    Args:
        text: Value to escape; None becomes "", other values are stringified

    Returns:
        Escaped text
    """
    if text is None:
        return ''
    if not isinstance(text, str):
        text = str(text)

    escaped = _TOKEN_RE.sub(lambda m: _REPLACEMENTS[m.group(0)], '\n' + text)[1:]
    return _PROTOCOL_RE.sub(r'\1&#58;', escaped)
