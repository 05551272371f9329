"""Expression service protocol and the Python-backed default.

The template engine never evaluates expressions itself. It hands every
attribute value and substitution body to an ExpressionService, stores the
returned Expression on the instruction, binds it to a variable scope, and
later evaluates it.

Binding is separate from evaluation so a compiled template can be reused
across renders: the cache rebinds every expression only when the
environment object changes between two renders.

Example:
    >>> service = PythonExpressionService()
    >>> expr = service.compile("price * qty")
    >>> expr.bind({"price": 3, "qty": 2})
    >>> expr.evaluate()
    6
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, Protocol, runtime_checkable

from xtemplate.engine.exceptions import ExpressionError
from xtemplate.engine.globals import DEFAULT_GLOBALS


@runtime_checkable
class Expression(Protocol):
    """A compiled, reusable expression.

    ``evaluate()`` yields exactly one value: the first of a value list.
    ``evaluate_many(count)`` yields every value, adjusted to ``count``.
    """

    source: str

    def bind(self, env: MutableMapping[str, Any]) -> None: ...

    def evaluate(self) -> Any: ...

    def evaluate_many(self, count: int) -> tuple[Any, ...]: ...


class ExpressionService(Protocol):
    """Compiles text fragments into Expressions."""

    def compile(self, source: str) -> Expression: ...


def adjust_results(value: Any, count: int) -> tuple[Any, ...]:
    """Spread ``value`` over exactly ``count`` results.

    A tuple counts as several results, anything else as one. Missing
    results are None, surplus results are dropped.

    >>> adjust_results((1, 2, 3), 2)
    (1, 2)
    >>> adjust_results("a", 3)
    ('a', None, None)
    """
    values = value if isinstance(value, tuple) else (value,)
    if len(values) >= count:
        return values[:count]
    return values + (None,) * (count - len(values))


def is_truthy(value: Any) -> bool:
    """Only None and False are falsy; 0 and "" are true."""
    return value is not None and value is not False


class Scope(Mapping[str, Any]):
    """Name lookup for one evaluation.

    Looks in the environment first. Names the environment lacks but the
    service globals or Python builtins provide raise KeyError so ``eval``
    falls through to them; any other name is absent and reads as None.
    """

    __slots__ = ("_env", "_globals")

    def __init__(self, env: Mapping[str, Any], globals_: Mapping[str, Any]):
        self._env = env
        self._globals = globals_

    def __getitem__(self, name: str) -> Any:
        try:
            return self._env[name]
        except KeyError:
            pass
        if name in self._globals or hasattr(builtins, name):
            raise KeyError(name)
        return None

    def __iter__(self) -> Iterator[str]:
        return iter(self._env)

    def __len__(self) -> int:
        return len(self._env)


class PythonExpression:
    """Expression backed by a Python code object compiled in eval mode.

    How many values an expression yields is decided by how it is written,
    never by the type of what it returns:

    - ``a, b`` (a top-level tuple display) is a list of two values;
      ``${a, b}`` writes ``a`` and ``<x:if cond="x, y">`` tests ``x``.
    - Anything else is one value, so a variable holding ``(3, 4)`` is
      assigned by ``<x:set/>`` as that tuple.
    - A call in last position of a value list expands a tuple it returns
      into several values, which is how ``in="ipairs(items)"`` supplies
      the loop triple. Only ``evaluate_many()`` expands calls; in a
      single-value position a call's result is used as returned.

    Attributes:
        source: Expression text as written in the template
        multi: True when the expression is a top-level value list
        tail_call: True when the last value is a function call
    """

    __slots__ = ("_code", "_globals", "_scope", "multi", "source", "tail_call")

    def __init__(
        self,
        source: str,
        code: Any,
        globals_: dict[str, Any],
        *,
        multi: bool = False,
        tail_call: bool = False,
    ):
        self.source = source
        self.multi = multi
        self.tail_call = tail_call
        self._code = code
        self._globals = globals_
        self._scope: Scope | None = None

    def bind(self, env: MutableMapping[str, Any]) -> None:
        self._scope = Scope(env, self._globals)

    def _run(self) -> Any:
        if self._scope is None:
            raise RuntimeError(f"expression {self.source!r} is not bound to an environment")
        return eval(self._code, self._globals, self._scope)

    def evaluate(self) -> Any:
        value = self._run()
        if self.multi:
            return value[0] if value else None
        return value

    def evaluate_many(self, count: int) -> tuple[Any, ...]:
        value = self._run()
        values = value if self.multi else (value,)
        if self.tail_call and values and isinstance(values[-1], tuple):
            values = values[:-1] + values[-1]
        return adjust_results(values, count)

    def __repr__(self) -> str:
        return f"<PythonExpression {self.source!r}>"


class PythonExpressionService:
    """Compile template expressions as Python expressions.

    Args:
        globals: Extra names visible to every expression. The generic-for
            helpers (``ipairs``, ``pairs``, ``iterate``) are always present
            unless overridden here.
    """

    __slots__ = ("_globals",)

    def __init__(self, globals: Mapping[str, Any] | None = None):
        self._globals: dict[str, Any] = {"__builtins__": builtins, **DEFAULT_GLOBALS}
        if globals:
            self._globals.update(globals)

    @property
    def globals(self) -> dict[str, Any]:
        return self._globals

    def compile(self, source: str) -> PythonExpression:
        if not source.strip():
            raise ExpressionError("empty expression")
        # Parenthesized so expressions may span lines.
        try:
            tree = ast.parse(f"(\n{source}\n)", "<expression>", "eval")
            code = compile(tree, "<expression>", "eval")
        except SyntaxError as e:
            raise ExpressionError(f"{source!r}: {e.msg}") from e
        except ValueError as e:
            raise ExpressionError(f"{source!r}: {e}") from e
        body = tree.body
        multi = isinstance(body, ast.Tuple) and bool(body.elts)
        last = body.elts[-1] if multi else body
        return PythonExpression(
            source,
            code,
            self._globals,
            multi=multi,
            tail_call=isinstance(last, ast.Call),
        )


def type_name(value: Any) -> str:
    """Name of a value's type as shown in substitution placeholders."""
    return "nil" if value is None else type(value).__name__
