"""Text helpers shared by the compiler."""

from __future__ import annotations

import re

_ENTITIES = {"&quot;": '"', "&lt;": "<", "&gt;": ">", "&amp;": "&"}
_ENTITY_RE = re.compile(r"&(?:quot|lt|gt|amp);")

_NAME_SEPARATOR_RE = re.compile(r"[\t ,]+")

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def unescape_xml(text: str) -> str:
    """Replace the four entities attribute values and expressions may use.

    Single pass, so ``&amp;lt;`` becomes ``&lt;`` and not ``<``.
    """
    if "&" not in text:
        return text
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)


def parse_names(text: str) -> tuple[str, ...]:
    """Split a name list on tabs, spaces and commas, dropping empties."""
    return tuple(name for name in _NAME_SEPARATOR_RE.split(text) if name)


def count_line_breaks(source: str, start: int, end: int) -> int:
    """Line breaks in ``source[start:end]``; CRLF, CR and LF each count once."""
    return len(_LINE_BREAK_RE.findall(source, start, end))


def line_at(source: str, pos: int) -> int:
    """1-based line of ``pos``."""
    return count_line_breaks(source, 0, pos) + 1


def find_closing_brace(source: str, pos: int) -> int:
    """Index of the ``}`` closing a brace opened just before ``pos``, or -1.

    Braces inside single- or double-quoted spans do not count. Inside a
    quoted span a backslash escapes the matching quote character.
    """
    depth = 1
    quote: str | None = None
    end = len(source)
    while pos < end:
        char = source[pos]
        if char == "{" and quote is None:
            depth += 1
        elif char == "}" and quote is None:
            depth -= 1
            if depth == 0:
                return pos
        elif char in "\"'":
            if quote is None:
                quote = char
            elif quote == char:
                quote = None
        elif char == "\\" and quote is not None and source.startswith(quote, pos + 1):
            pos += 1
        pos += 1
    return -1
