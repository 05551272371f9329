"""Output instructions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from xtemplate.nodes.base import Node

if TYPE_CHECKING:
    from xtemplate.expressions import Expression


class EscapeMode(Enum):
    """How a substituted string is transformed before it is written."""

    NONE = "none"
    XML = "x"
    URL = "u"
    JS = "j"


@dataclass(slots=True)
class Raw(Node):
    """Literal template text, written verbatim."""

    value: str


@dataclass(slots=True)
class Sub(Node):
    """Substitution: ${expr} or $[flags]{expr}"""

    expr: Expression
    escape: EscapeMode = EscapeMode.XML
    suppress_nil: bool = False
