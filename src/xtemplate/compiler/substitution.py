"""Substitution compilation for the xtemplate compiler.

``${expr}`` writes the XML-escaped value of ``expr``. A bracketed flag
string selects other behaviour:

    x   escape XML/HTML (& < >)
    u   escape for URLs (percent-encoding)
    j   escape for JavaScript string literals
    n   write nothing for None instead of "(nil)"

At most one of x, u and j may be given. ``$[]{expr}`` and ``$[n]{expr}``
write the value unescaped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from xtemplate.compiler.text import find_closing_brace, unescape_xml
from xtemplate.engine.exceptions import ErrorCode
from xtemplate.nodes import EscapeMode, Sub

if TYPE_CHECKING:
    from xtemplate.expressions import Expression
    from xtemplate.nodes import Node

_ESCAPE_FLAGS = {mode.value: mode for mode in (EscapeMode.XML, EscapeMode.URL, EscapeMode.JS)}


class SubstitutionCompilationMixin:
    """Mixin for compiling substitutions."""

    __slots__ = ()

    if TYPE_CHECKING:
        _source: str
        _nodes: list[Node]

        def _lineno(self, pos: int) -> int: ...

        def _compile_expression(self, text: str, lineno: int) -> Expression: ...

        def _fail(
            self,
            message: str,
            lineno: int,
            code: ErrorCode,
            cause: BaseException | None = None,
        ) -> NoReturn: ...

    def _compile_substitution(self, start: int) -> int:
        """Compile the substitution whose ``$`` is at ``start``, return the end position."""
        source = self._source
        lineno = self._lineno(start)
        pos = start + 1

        if source.startswith("[", pos):
            flags_end = source.find("]", pos + 1)
            if flags_end == -1:
                self._fail("']' expected", lineno, ErrorCode.MALFORMED_SUBSTITUTION)
            escape, suppress_nil = self._parse_flags(source[pos + 1 : flags_end], lineno)
            pos = flags_end + 1
        else:
            escape, suppress_nil = EscapeMode.XML, False

        if not source.startswith("{", pos):
            self._fail("'{' expected", lineno, ErrorCode.MALFORMED_SUBSTITUTION)
        end = find_closing_brace(source, pos + 1)
        if end == -1:
            self._fail("'}' expected", lineno, ErrorCode.MALFORMED_SUBSTITUTION)

        expr = self._compile_expression(unescape_xml(source[pos + 1 : end]), lineno)
        self._nodes.append(Sub(lineno, expr, escape, suppress_nil))
        return end + 1

    def _parse_flags(self, flags: str, lineno: int) -> tuple[EscapeMode, bool]:
        escape: EscapeMode | None = None
        suppress_nil = False
        for flag in flags:
            if flag in _ESCAPE_FLAGS:
                if escape is not None:
                    self._fail("bad flags: multiple escapes", lineno, ErrorCode.BAD_FLAGS)
                escape = _ESCAPE_FLAGS[flag]
            elif flag == "n":
                suppress_nil = True
            else:
                self._fail(f"bad flags: unknown character {flag!r}", lineno, ErrorCode.BAD_FLAGS)
        return escape or EscapeMode.NONE, suppress_nil
