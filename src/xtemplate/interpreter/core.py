"""Interpreter — executes compiled instructions against an environment.

Execution is a single instruction-pointer walk over the flat instruction
list. Jumps set the pointer directly; every other instruction runs its
effect and advances by one. The only recursion is ``<x:include/>``, which
renders the included template into the same output and environment one
depth level further down, bounded by RenderContext.max_depth.

Loop state lives on a per-template stack of ``[iterator, state, control]``
triples: ForInit pushes one, the matching ForNext advances it and pops it
when the iterator reports the end.

Dispatch:
    ```python
    handler = self._dispatch[type(node)]
    ip = handler(node, ip, frame)
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from xtemplate.engine.exceptions import ErrorCode, RenderError, TemplateError
from xtemplate.expressions import adjust_results, is_truthy, type_name
from xtemplate.nodes import ForInit, ForNext, If, Include, Jump, Raw, Set, Sub
from xtemplate.utils.escape import ESCAPES

if TYPE_CHECKING:
    from xtemplate.expressions import Expression
    from xtemplate.nodes import Node
    from xtemplate.render_context import RenderContext
    from xtemplate.template import Template

logger = logging.getLogger(__name__)

Write = Callable[[str], Any]


class TemplateProvider(Protocol):
    """Anything that can hand out compiled templates by identifier."""

    def get_template(self, name: str) -> Template: ...


@dataclass(slots=True)
class _Frame:
    """State of one template execution."""

    template: Template
    env: MutableMapping[str, Any]
    write: Write
    ctx: RenderContext
    loops: list[list[Any]] = field(default_factory=list)


class Interpreter:
    """Run compiled templates.

    Args:
        templates: Source of compiled templates for render() and includes,
            normally the TemplateCache

    Example:
        ```python
        cache = TemplateCache(resolver={"page.html": "<h1>${title}</h1>"}.get)
        buf = []
        Interpreter(cache).render("page.html", {"title": "Hi"}, buf.append, RenderContext("page.html"))
        "".join(buf)  # "<h1>Hi</h1>"
        ```

    """

    __slots__ = ("_dispatch", "_templates")

    def __init__(self, templates: TemplateProvider):
        self._templates = templates
        self._dispatch: dict[type, Callable[[Any, int, _Frame], int]] = {
            Raw: self._exec_raw,
            Sub: self._exec_sub,
            If: self._exec_if,
            Jump: self._exec_jump,
            ForInit: self._exec_for_init,
            ForNext: self._exec_for_next,
            Set: self._exec_set,
            Include: self._exec_include,
        }

    def render(
        self,
        name: str,
        env: MutableMapping[str, Any],
        write: Write,
        ctx: RenderContext,
    ) -> None:
        """Resolve, bind and execute the template ``name``.

        Raises:
            IncludeDepthError: If ``ctx`` is nested deeper than allowed
            RenderError: If an expression or the output fails
        """
        ctx.check_depth()
        template = self._templates.get_template(name)
        if template.bind(env):
            logger.debug("Bound %r to environment %#x", template.name, id(env))
        self.execute(template, env, write, ctx)

    def execute(
        self,
        template: Template,
        env: MutableMapping[str, Any],
        write: Write,
        ctx: RenderContext,
    ) -> None:
        """Execute an already bound template."""
        frame = _Frame(template, env, write, ctx)
        nodes = template.nodes
        dispatch = self._dispatch
        ip = 0
        end = len(nodes)
        while ip < end:
            node = nodes[ip]
            ip = dispatch[type(node)](node, ip, frame)

    # -- instructions ---------------------------------------------------------

    def _exec_raw(self, node: Raw, ip: int, frame: _Frame) -> int:
        self._write(frame, node, node.value)
        return ip + 1

    def _exec_sub(self, node: Sub, ip: int, frame: _Frame) -> int:
        value = self._evaluate(frame, node, node.expr)
        if isinstance(value, str):
            text = value
        elif value is None and node.suppress_nil:
            return ip + 1
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            text = str(value)
        else:
            text = f"({type_name(value)})"
        if text:
            try:
                text = ESCAPES[node.escape](text)
            except Exception as e:
                raise self._error(frame, node, f"{type(e).__name__}: {e}", node.expr) from e
            self._write(frame, node, text)
        return ip + 1

    def _exec_if(self, node: If, ip: int, frame: _Frame) -> int:
        if is_truthy(self._evaluate(frame, node, node.condition)):
            return ip + 1
        return node.else_target

    def _exec_jump(self, node: Jump, ip: int, frame: _Frame) -> int:
        return node.target

    def _exec_for_init(self, node: ForInit, ip: int, frame: _Frame) -> int:
        iterator, state, control = self._evaluate(frame, node, node.iter_expr, 3)
        if not callable(iterator):
            raise self._error(
                frame,
                node,
                f"'for' expression must yield an iterator function, not {type_name(iterator)}",
                node.iter_expr,
            )
        frame.loops.append([iterator, state, control])
        return ip + 1

    def _exec_for_next(self, node: ForNext, ip: int, frame: _Frame) -> int:
        loop = frame.loops[-1]
        iterator, state, control = loop
        try:
            values = adjust_results(iterator(state, control), len(node.names))
        except TemplateError:
            raise
        except Exception as e:
            raise self._error(frame, node, f"{type(e).__name__}: {e}") from e
        if values[0] is None:
            frame.loops.pop()
            return node.end_target
        loop[2] = values[0]
        self._assign(frame.env, node.names, values)
        return ip + 1

    def _exec_set(self, node: Set, ip: int, frame: _Frame) -> int:
        values = self._evaluate(frame, node, node.values_expr, len(node.names))
        self._assign(frame.env, node.names, values)
        return ip + 1

    def _exec_include(self, node: Include, ip: int, frame: _Frame) -> int:
        name = self._evaluate(frame, node, node.filename_expr)
        if not isinstance(name, str):
            raise self._error(
                frame,
                node,
                f"include filename must be a string, not {type_name(name)}",
                node.filename_expr,
            )
        child = frame.ctx.child_context(name, node.lineno)
        self.render(name, frame.env, frame.write, child)
        return ip + 1

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _assign(
        env: MutableMapping[str, Any], names: tuple[str, ...], values: tuple[Any, ...]
    ) -> None:
        # Last to first, so the first of two equal names wins.
        for name, value in reversed(tuple(zip(names, values))):
            env[name] = value

    def _evaluate(
        self,
        frame: _Frame,
        node: Node,
        expr: Expression,
        count: int | None = None,
    ) -> Any:
        try:
            if count is None:
                return expr.evaluate()
            return expr.evaluate_many(count)
        except TemplateError:
            raise
        except Exception as e:
            raise self._error(frame, node, f"{type(e).__name__}: {e}", expr) from e

    def _write(self, frame: _Frame, node: Node, text: str) -> None:
        try:
            frame.write(text)
        except TemplateError:
            raise
        except Exception as e:
            raise self._error(
                frame, node, f"error writing template: {e}", code=ErrorCode.WRITE_ERROR
            ) from e

    @staticmethod
    def _error(
        frame: _Frame,
        node: Node,
        message: str,
        expr: Expression | None = None,
        code: ErrorCode | None = None,
    ) -> RenderError:
        return RenderError(
            message,
            template_name=frame.template.name,
            lineno=node.lineno,
            expression=expr.source if expr is not None else None,
            template_stack=frame.ctx.template_stack,
            code=code,
        )
