"""Compile-time block records.

The compiler keeps a stack of these while elements are open. They only
carry instruction indices that still need back-patching and never outlive
compilation.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class IfBlock:
    """An open <x:if> chain.

    Attributes:
        lineno: Line of the opening <x:if>
        start: Index of the first If instruction
        last: Index of the If whose else-target is still pending;
            None once <x:else/> has been seen
        jumps: Indices of the Jumps ending each branch but the last,
            resolved to just past the chain on </x:if>
    """

    lineno: int
    start: int
    last: int | None
    jumps: list[int] = field(default_factory=list)


@dataclass(slots=True)
class ForBlock:
    """An open <x:for> loop; ``start`` is the ForNext (loop head) index."""

    lineno: int
    start: int


Block = IfBlock | ForBlock
