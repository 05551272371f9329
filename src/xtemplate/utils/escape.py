"""Output escaping for substitutions.

Each encoding is a single pass over the string. XML and JavaScript use
``str.translate()`` tables; URL encoding percent-encodes the UTF-8 bytes
of everything outside the unreserved set ``A-Z a-z 0-9 - . _ ~``.
"""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import quote

from xtemplate.nodes import EscapeMode

# Quotes are left alone; values are meant for element content.
_XML_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
    }
)

_JS_ESCAPE_TABLE = str.maketrans(
    {
        "\b": "\\b",
        "\t": "\\t",
        "\n": "\\n",
        "\v": "\\v",
        "\f": "\\f",
        "\r": "\\r",
        '"': '\\"',
        "'": "\\'",
        "\\": "\\\\",
    }
)


def escape_xml(value: str) -> str:
    """Escape ``& < >`` for XML/HTML text.

    >>> escape_xml("<a href='x'>&</a>")
    "&lt;a href='x'&gt;&amp;&lt;/a&gt;"
    """
    return value.translate(_XML_ESCAPE_TABLE)


def escape_url(value: str) -> str:
    """Percent-encode everything but unreserved characters.

    >>> escape_url("a/b?c")
    'a%2Fb%3Fc'
    """
    return quote(value, safe="")


def escape_js(value: str) -> str:
    """Backslash-escape control characters, quotes and backslashes.

    >>> escape_js("'a'")
    "\\\\'a\\\\'"
    """
    return value.translate(_JS_ESCAPE_TABLE)


def _identity(value: str) -> str:
    return value


ESCAPES: dict[EscapeMode, Callable[[str], str]] = {
    EscapeMode.NONE: _identity,
    EscapeMode.XML: escape_xml,
    EscapeMode.URL: escape_url,
    EscapeMode.JS: escape_js,
}
