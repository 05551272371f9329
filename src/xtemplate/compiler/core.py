"""Compiler core — template text to instruction list in one pass.

Three constructs are recognized while scanning left to right; everything
else is raw text:

- control elements ``<x:name attr="...">`` and ``</x:name>``
- substitutions ``${expr}`` and ``$[flags]{expr}``
- the literal-dollar escape ``$$``

Pending raw text is flushed into a Raw instruction whenever a construct
is recognized and at end of input.

Control flow is compiled to index-based jumps. Targets that lie ahead of
the scan position are left UNRESOLVED and back-patched from the block
stack when the enclosing element closes:

    ```
    <x:if cond="a">A<x:elseif cond="b"/>B<x:else/>C</x:if>

    0  If(a, else_target=3)
    1  Raw("A")
    2  Jump(7)
    3  If(b, else_target=6)
    4  Raw("B")
    5  Jump(7)
    6  Raw("C")
    ```

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NoReturn

from xtemplate.compiler.blocks import Block
from xtemplate.compiler.elements import ElementCompilationMixin
from xtemplate.compiler.substitution import SubstitutionCompilationMixin
from xtemplate.compiler.text import count_line_breaks, line_at
from xtemplate.engine.exceptions import ErrorCode, ExpressionError, TemplateSyntaxError
from xtemplate.nodes import Node, Raw

if TYPE_CHECKING:
    from xtemplate.expressions import Expression, ExpressionService


class Compiler(ElementCompilationMixin, SubstitutionCompilationMixin):
    """Compile template source into a list of instructions.

    A Compiler instance is reusable but not reentrant; every ``compile()``
    call resets its scan state.

    Attributes:
        _expressions: Service that turns attribute and substitution text
            into Expressions
        _prefix: Element namespace, ``x`` for ``<x:if>``
        _construct_re: Finds the next element, substitution or ``$$``
        _name: Identifier of the template being compiled
        _source: Template source being compiled
        _nodes: Instructions emitted so far
        _blocks: Stack of open if-chains and loops

    Example:
            >>> from xtemplate.expressions import PythonExpressionService
            >>> compiler = Compiler(PythonExpressionService())
            >>> nodes = compiler.compile("greeting", "Hello, ${name}!")
            >>> [type(n).__name__ for n in nodes]
            ['Raw', 'Sub', 'Raw']

    """

    __slots__ = (
        "_blocks",
        "_construct_re",
        "_expressions",
        "_line",
        "_line_pos",
        "_name",
        "_nodes",
        "_prefix",
        "_source",
    )

    def __init__(self, expressions: ExpressionService, prefix: str = "x"):
        if not prefix:
            raise ValueError("element prefix must not be empty")
        self._expressions = expressions
        self._prefix = prefix
        self._construct_re = re.compile(rf"</?{re.escape(prefix)}:|\$[{{\[$]")
        self._reset("<template>", "")

    @property
    def prefix(self) -> str:
        return self._prefix

    def _reset(self, name: str, source: str) -> None:
        self._name = name
        self._source = source
        self._nodes: list[Node] = []
        self._blocks: list[Block] = []
        self._line = 1
        self._line_pos = 0

    def compile(self, name: str, source: str) -> list[Node]:
        """Compile ``source`` into instructions.

        Args:
            name: Template identifier, used in error messages
            source: Template text

        Returns:
            Instruction list with every jump target resolved

        Raises:
            TemplateSyntaxError: On the first malformed construct
        """
        self._reset(name, source)
        construct_re = self._construct_re
        begin = 0
        pos = 0
        while match := construct_re.search(source, pos):
            pos = match.start()
            token = match.group()
            if token == "$$":
                # Keep the first dollar, drop the second.
                self._flush_raw(begin, pos + 1)
                pos += 2
            else:
                self._flush_raw(begin, pos)
                if token[0] == "<":
                    pos = self._compile_element(pos)
                else:
                    pos = self._compile_substitution(pos)
            begin = pos
        self._flush_raw(begin, len(source))

        if self._blocks:
            raise TemplateSyntaxError(
                f"{len(self._blocks)} open element(s) at end of template",
                self._blocks[-1].lineno,
                name=name,
                source=source,
                code=ErrorCode.UNBALANCED_BLOCK,
            )

        nodes = self._nodes
        self._reset("<template>", "")
        return nodes

    def _flush_raw(self, begin: int, end: int) -> None:
        if end > begin:
            self._nodes.append(Raw(self._lineno(begin), self._source[begin:end]))

    def _lineno(self, pos: int) -> int:
        """Line of ``pos``, counted incrementally since the scan only moves forward."""
        if pos < self._line_pos:
            return line_at(self._source, pos)
        self._line += count_line_breaks(self._source, self._line_pos, pos)
        self._line_pos = pos
        return self._line

    def _compile_expression(self, text: str, lineno: int) -> Expression:
        try:
            return self._expressions.compile(text)
        except ExpressionError as e:
            self._fail(str(e), lineno, ErrorCode.INVALID_EXPRESSION, cause=e)

    def _fail(
        self,
        message: str,
        lineno: int,
        code: ErrorCode,
        cause: BaseException | None = None,
    ) -> NoReturn:
        raise TemplateSyntaxError(
            message,
            lineno,
            name=self._name,
            source=self._source,
            code=code,
        ) from cause
