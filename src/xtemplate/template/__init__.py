"""Compiled template objects."""

from xtemplate.template.core import Template

__all__ = ["Template"]
