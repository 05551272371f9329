"""Template engine support: cache, loaders, exceptions and expression globals.

TemplateCache lives in xtemplate.engine.cache and is not re-exported here,
since it depends on the compiler, which depends on these exceptions.
"""

from __future__ import annotations

from xtemplate.engine.exceptions import (
    ErrorCode,
    ExpressionError,
    IncludeDepthError,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from xtemplate.engine.loaders import FileSystemLoader, FunctionLoader

__all__ = [
    "ErrorCode",
    "ExpressionError",
    "FileSystemLoader",
    "FunctionLoader",
    "IncludeDepthError",
    "RenderError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
]
