"""Template compiler: source text to a flat instruction list."""

from __future__ import annotations

from xtemplate.compiler.core import Compiler

__all__ = ["Compiler"]
