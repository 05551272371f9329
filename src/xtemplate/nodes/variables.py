"""Assignment instructions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from xtemplate.nodes.base import Node

if TYPE_CHECKING:
    from xtemplate.expressions import Expression


@dataclass(slots=True)
class Set(Node):
    """<x:set names="a, b" expressions="1, 2"/>"""

    names: tuple[str, ...]
    values_expr: Expression
