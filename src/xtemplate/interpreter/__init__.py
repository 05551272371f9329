"""Template interpreter."""

from __future__ import annotations

from xtemplate.interpreter.core import Interpreter, TemplateProvider

__all__ = ["Interpreter", "TemplateProvider"]
