"""Default global functions available to every expression.

Loop Protocol:
    ``<x:for names="..." in="...">`` evaluates its ``in`` expression into
    three values ``(iterator, state, control)``. Before each pass the
    interpreter calls ``iterator(state, control)``; a None first result
    ends the loop, otherwise the results are bound to ``names`` and the
    first result becomes the next ``control``.

    The helpers below build such triples for Python containers. Any other
    callable following the same contract works in their place:

        <x:for names="i, item" in="ipairs(items)">${i}: ${item}</x:for>
        <x:for names="key, value" in="pairs(options)">${key}=${value}</x:for>
        <x:for names="_, line" in="iterate(open_lines())">${line}</x:for>
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

IteratorTriple = tuple[Callable[[Any, Any], Any], Any, Any]


def _ipairs_next(seq: Sequence[Any], index: int) -> tuple[int, Any] | None:
    index += 1
    if index > len(seq):
        return None
    return index, seq[index - 1]


def ipairs(seq: Sequence[Any]) -> IteratorTriple:
    """Iterate a sequence as (1-based index, item)."""
    return _ipairs_next, seq, 0


def _next_item(items: Iterator[tuple[Any, Any]], _control: Any) -> tuple[Any, Any] | None:
    return next(items, None)


def pairs(mapping: Mapping[Any, Any]) -> IteratorTriple:
    """Iterate a mapping as (key, value) in mapping order.

    A None key ends the loop early, since None is the end marker.
    """
    return _next_item, iter(mapping.items()), None


def iterate(iterable: Iterable[Any]) -> IteratorTriple:
    """Iterate any iterable (generators included) as (1-based index, item)."""
    return _next_item, enumerate(iterable, 1), None


DEFAULT_GLOBALS: dict[str, Callable[..., Any]] = {
    "ipairs": ipairs,
    "pairs": pairs,
    "iterate": iterate,
}
