"""Compiled template — an instruction list plus its environment binding.

Architecture:
    ```
    Template
    ├── name: str                  # Template identifier
    ├── nodes: list[Node]          # Instructions, jump targets resolved
    ├── _expressions: tuple[...]   # Every Expression embedded in nodes
    └── _bound_env: MutableMapping # Environment the expressions are bound to
    ```

Binding:
    Expressions are bound to one environment at a time. ``bind()`` walks
    the expressions only when the environment object differs from the one
    bound last, so rendering the same template repeatedly against the same
    environment (a loop around an include, say) costs nothing extra.

Thread-Safety:
    None. Two concurrent renders of one Template against different
    environments would race on the shared binding.

"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from xtemplate.nodes import ForInit, If, Include, Set, Sub

if TYPE_CHECKING:
    from xtemplate.expressions import Expression
    from xtemplate.nodes import Node


def _expression_of(node: Node) -> Expression | None:
    if isinstance(node, If):
        return node.condition
    if isinstance(node, Sub):
        return node.expr
    if isinstance(node, ForInit):
        return node.iter_expr
    if isinstance(node, Set):
        return node.values_expr
    if isinstance(node, Include):
        return node.filename_expr
    return None


class Template:
    """Compiled template ready for the interpreter.

    Templates are immutable after construction except for the identity of
    the environment their expressions are bound to.

    Attributes:
        name: Template identifier
        nodes: Compiled instructions
        source: Template source, kept for error messages
    """

    __slots__ = ("_bound_env", "_expressions", "name", "nodes", "source")

    def __init__(self, name: str, nodes: list[Node], source: str | None = None):
        self.name = name
        self.nodes = nodes
        self.source = source
        self._expressions = tuple(
            expr for expr in map(_expression_of, nodes) if expr is not None
        )
        self._bound_env: MutableMapping[str, Any] | None = None

    @property
    def bound_env(self) -> MutableMapping[str, Any] | None:
        """Environment the expressions were last bound to."""
        return self._bound_env

    def bind(self, env: MutableMapping[str, Any]) -> bool:
        """Bind every expression to ``env``.

        Returns:
            True if a rebind happened, False if ``env`` was already bound
        """
        if env is self._bound_env:
            return False
        for expr in self._expressions:
            expr.bind(env)
        self._bound_env = env
        return True

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"<Template {self.name!r} ({len(self.nodes)} instructions)>"
