"""Control element compilation for the xtemplate compiler.

Handles ``<x:if>``, ``<x:elseif/>``, ``<x:else/>``, ``<x:for>``,
``<x:set/>`` and ``<x:include/>``. Each element is parsed into an Element
record and dispatched by name; the handlers emit instructions and
maintain the block stack.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NoReturn

from xtemplate.compiler.blocks import ForBlock, IfBlock
from xtemplate.compiler.text import parse_names, unescape_xml
from xtemplate.engine.exceptions import ErrorCode
from xtemplate.nodes import ForInit, ForNext, If, Include, Jump, Set

if TYPE_CHECKING:
    from xtemplate.compiler.blocks import Block
    from xtemplate.expressions import Expression
    from xtemplate.nodes import Node

_ELEMENT_NAME_RE = re.compile(r"[^\s>/]*")
_ATTRIBUTE_NAME_RE = re.compile(r'[^\s=>/"]+')
_SPACE_RE = re.compile(r"\s*")

_ELEMENT_HANDLERS = {
    "if": "_compile_if",
    "elseif": "_compile_elseif",
    "else": "_compile_else",
    "for": "_compile_for",
    "set": "_compile_set",
    "include": "_compile_include",
}


@dataclass(slots=True)
class Element:
    """A parsed control element.

    ``<x:if cond="a">`` opens, ``</x:if>`` closes, and the self-closing
    ``<x:set .../>`` does both.
    """

    name: str
    lineno: int
    opening: bool
    closing: bool
    attrs: dict[str, str] = field(default_factory=dict)


class ElementCompilationMixin:
    """Mixin for compiling control elements."""

    __slots__ = ()

    if TYPE_CHECKING:
        _source: str
        _prefix: str
        _nodes: list[Node]
        _blocks: list[Block]

        def _lineno(self, pos: int) -> int: ...

        def _compile_expression(self, text: str, lineno: int) -> Expression: ...

        def _fail(
            self,
            message: str,
            lineno: int,
            code: ErrorCode,
            cause: BaseException | None = None,
        ) -> NoReturn: ...

    def _compile_element(self, start: int) -> int:
        """Parse the element at ``start``, emit its instructions, return the end position."""
        element, end = self._parse_element(start)
        handler_name = _ELEMENT_HANDLERS.get(element.name)
        if handler_name is None:
            self._fail(f"bad element {element.name!r}", element.lineno, ErrorCode.UNKNOWN_ELEMENT)
        getattr(self, handler_name)(element)
        return end

    def _parse_element(self, start: int) -> tuple[Element, int]:
        source = self._source
        lineno = self._lineno(start)
        pos = start + 1
        closing = source.startswith("/", pos)
        if closing:
            pos += 1
        pos += len(self._prefix) + 1

        match = _ELEMENT_NAME_RE.match(source, pos)
        name = match.group()
        pos = _SPACE_RE.match(source, match.end()).end()

        attrs: dict[str, str] = {}
        while pos < len(source) and source[pos] not in ">/":
            match = _ATTRIBUTE_NAME_RE.match(source, pos)
            if match is None:
                self._fail("attribute name expected", lineno, ErrorCode.MALFORMED_ELEMENT)
            key = match.group()
            pos = _SPACE_RE.match(source, match.end()).end()
            if not source.startswith("=", pos):
                self._fail("'=' expected", lineno, ErrorCode.MALFORMED_ELEMENT)
            pos = _SPACE_RE.match(source, pos + 1).end()
            if not source.startswith('"', pos):
                self._fail("'\"' expected", lineno, ErrorCode.MALFORMED_ELEMENT)
            value_end = source.find('"', pos + 1)
            if value_end == -1:
                self._fail("'\"' expected", lineno, ErrorCode.MALFORMED_ELEMENT)
            attrs[unescape_xml(key)] = unescape_xml(source[pos + 1 : value_end])
            pos = _SPACE_RE.match(source, value_end + 1).end()

        opening = not closing
        if source.startswith("/", pos):
            closing = True
            pos += 1
        if not source.startswith(">", pos):
            self._fail("'>' expected", lineno, ErrorCode.MALFORMED_ELEMENT)

        return Element(name, lineno, opening, closing, attrs), pos + 1

    def _require(self, element: Element, attr: str) -> str:
        value = element.attrs.get(attr)
        if value is None:
            self._fail(f"missing attribute {attr!r}", element.lineno, ErrorCode.MISSING_ATTRIBUTE)
        return value

    def _require_names(self, element: Element) -> tuple[str, ...]:
        names = parse_names(self._require(element, "names"))
        if not names:
            self._fail("empty 'names'", element.lineno, ErrorCode.MISSING_ATTRIBUTE)
        return names

    def _require_opening(self, element: Element) -> None:
        if not element.opening:
            self._fail(
                f"{element.name!r} cannot be closed", element.lineno, ErrorCode.UNBALANCED_BLOCK
            )

    def _open_if_chain(self, element: Element) -> IfBlock:
        """The innermost block, which must be an if-chain still taking branches."""
        block = self._blocks[-1] if self._blocks else None
        if not isinstance(block, IfBlock) or block.last is None:
            self._fail("no 'if' to continue", element.lineno, ErrorCode.UNBALANCED_BLOCK)
        return block

    def _end_branch(self, block: IfBlock, lineno: int) -> None:
        """Close the current branch and point the pending If at what follows."""
        block.jumps.append(len(self._nodes))
        self._nodes.append(Jump(lineno))
        self._nodes[block.last].else_target = len(self._nodes)

    def _compile_if(self, element: Element) -> None:
        nodes = self._nodes
        if element.opening:
            cond = self._compile_expression(self._require(element, "cond"), element.lineno)
            self._blocks.append(IfBlock(element.lineno, start=len(nodes), last=len(nodes)))
            nodes.append(If(element.lineno, cond))

        if element.closing:
            block = self._blocks[-1] if self._blocks else None
            if not isinstance(block, IfBlock):
                self._fail("no 'if' to close", element.lineno, ErrorCode.UNBALANCED_BLOCK)
            self._blocks.pop()
            end = len(nodes)
            if block.last is not None:
                nodes[block.last].else_target = end
            for index in block.jumps:
                nodes[index].target = end

    def _compile_elseif(self, element: Element) -> None:
        self._require_opening(element)
        block = self._open_if_chain(element)
        cond = self._compile_expression(self._require(element, "cond"), element.lineno)
        self._end_branch(block, element.lineno)
        block.last = len(self._nodes)
        self._nodes.append(If(element.lineno, cond))

    def _compile_else(self, element: Element) -> None:
        self._require_opening(element)
        block = self._open_if_chain(element)
        self._end_branch(block, element.lineno)
        block.last = None

    def _compile_for(self, element: Element) -> None:
        nodes = self._nodes
        if element.opening:
            iter_expr = self._compile_expression(self._require(element, "in"), element.lineno)
            names = self._require_names(element)
            nodes.append(ForInit(element.lineno, iter_expr))
            self._blocks.append(ForBlock(element.lineno, start=len(nodes)))
            nodes.append(ForNext(element.lineno, names))

        if element.closing:
            block = self._blocks[-1] if self._blocks else None
            if not isinstance(block, ForBlock):
                self._fail("no 'for' to close", element.lineno, ErrorCode.UNBALANCED_BLOCK)
            self._blocks.pop()
            nodes.append(Jump(element.lineno, block.start))
            nodes[block.start].end_target = len(nodes)

    def _compile_set(self, element: Element) -> None:
        self._require_opening(element)
        names = self._require_names(element)
        values = self._compile_expression(self._require(element, "expressions"), element.lineno)
        self._nodes.append(Set(element.lineno, names, values))

    def _compile_include(self, element: Element) -> None:
        self._require_opening(element)
        filename = self._compile_expression(self._require(element, "filename"), element.lineno)
        self._nodes.append(Include(element.lineno, filename))

