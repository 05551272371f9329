"""Template structure instructions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from xtemplate.nodes.base import Node

if TYPE_CHECKING:
    from xtemplate.expressions import Expression


@dataclass(slots=True)
class Include(Node):
    """<x:include filename="'footer.html'"/>"""

    filename_expr: Expression
