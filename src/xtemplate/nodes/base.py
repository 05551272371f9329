"""Base node class for compiled instructions."""

from __future__ import annotations

from dataclasses import dataclass

# Jump target that has not been back-patched yet.
UNRESOLVED = -1


@dataclass(slots=True)
class Node:
    """Base class for all instructions.

    Every instruction records the 1-based source line it was compiled from
    so render errors can point back into the template.
    """

    lineno: int
