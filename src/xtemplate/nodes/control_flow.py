"""Control flow instructions.

Jump targets are plain indices into the instruction list. They start out
as UNRESOLVED and are back-patched by the compiler's block stack.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xtemplate.nodes.base import UNRESOLVED, Node

if TYPE_CHECKING:
    from xtemplate.expressions import Expression


@dataclass(slots=True)
class Jump(Node):
    """Unconditional transfer to ``target``."""

    target: int = UNRESOLVED


@dataclass(slots=True)
class If(Node):
    """<x:if cond="..."> / <x:elseif cond="..."/>

    Falls through when ``condition`` is truthy, jumps to ``else_target``
    otherwise.
    """

    condition: Expression
    else_target: int = UNRESOLVED


@dataclass(slots=True)
class ForInit(Node):
    """Evaluates the ``in`` expression into (iterator, state, control)."""

    iter_expr: Expression


@dataclass(slots=True)
class ForNext(Node):
    """Loop head: advances the iterator, jumps to ``end_target`` when done."""

    names: tuple[str, ...] = field(default_factory=tuple)
    end_target: int = UNRESOLVED
