"""Instruction set of compiled templates.

A compiled template is a flat list of these nodes. Control flow is
expressed with index-based jump targets rather than nested bodies, so the
interpreter walks the list with a single instruction pointer.
"""

from __future__ import annotations

from xtemplate.nodes.base import UNRESOLVED, Node
from xtemplate.nodes.control_flow import ForInit, ForNext, If, Jump
from xtemplate.nodes.output import EscapeMode, Raw, Sub
from xtemplate.nodes.structure import Include
from xtemplate.nodes.variables import Set

__all__ = [
    "UNRESOLVED",
    "EscapeMode",
    "ForInit",
    "ForNext",
    "If",
    "Include",
    "Jump",
    "Node",
    "Raw",
    "Set",
    "Sub",
]
