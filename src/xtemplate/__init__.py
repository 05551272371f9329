"""xtemplate — compile-once text templates with XML-style control elements.

Templates mix literal text with substitutions and control elements:

    <ul>
    <x:for names="_, item" in="ipairs(items)">
      <li>${item.title}</li>
    </x:for>
    </ul>
    <x:if cond="user">Hello, ${user}!<x:else/>Please log in.</x:if>
    <x:set names="year" expressions="2024"/>
    <x:include filename="'footer.html'"/>
    Price: $$${price}

Quickstart:
    >>> import xtemplate
    >>> xtemplate.set_resolver({"hello": "Hello, ${name}!"}.get)
    >>> xtemplate.render("hello", {"name": "<World>"})
    'Hello, &lt;World&gt;!'

Architecture:
identifier → resolver → source → Compiler → instructions → TemplateCache
instructions + environment → Interpreter → output

Pipeline stages:
1. **Compiler**: One left-to-right scan emits a flat instruction list;
   forward jumps of if-chains and loops are back-patched from a block stack
2. **TemplateCache**: Compiles each identifier once and rebinds its
   expressions only when the environment object changes
3. **Interpreter**: Walks the instructions with a single instruction
   pointer; includes recurse into the same output and environment

Expressions are Python expressions. Unknown names evaluate to None, and
only None and False are false.

The module-level functions below use one shared default TemplateCache.
None of this is thread-safe.

"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import IO, Any

from xtemplate.compiler import Compiler
from xtemplate.engine import (
    ErrorCode,
    ExpressionError,
    FileSystemLoader,
    FunctionLoader,
    IncludeDepthError,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from xtemplate.engine.cache import TemplateCache
from xtemplate.engine.globals import ipairs, iterate, pairs
from xtemplate.engine.loaders import Resolver
from xtemplate.expressions import Expression, ExpressionService, PythonExpressionService
from xtemplate.interpreter import Interpreter
from xtemplate.render_context import RenderContext
from xtemplate.template import Template

__version__ = "0.1.0"

_default_cache = TemplateCache()


def get_cache() -> TemplateCache:
    """The TemplateCache behind the module-level functions."""
    return _default_cache


def render(
    name: str,
    env: MutableMapping[str, Any],
    out: IO[str] | None = None,
) -> str | None:
    """Render template ``name`` against ``env``.

    Returns the output as a string, or streams it into ``out`` and
    returns None.
    """
    return _default_cache.render(name, env, out)


def get_resolver() -> Resolver | None:
    """The custom resolver, or None when templates load from the filesystem."""
    return _default_cache.resolver


def set_resolver(resolver: Resolver | None) -> None:
    """Install a custom resolver; None restores filesystem resolution.

    Compiled templates stay cached; call clear() to recompile them from
    the new resolver.
    """
    _default_cache.resolver = resolver


def clear() -> None:
    """Drop every compiled template."""
    _default_cache.clear()


__all__ = [
    "Compiler",
    "ErrorCode",
    "Expression",
    "ExpressionError",
    "ExpressionService",
    "FileSystemLoader",
    "FunctionLoader",
    "IncludeDepthError",
    "Interpreter",
    "PythonExpressionService",
    "RenderContext",
    "RenderError",
    "Template",
    "TemplateCache",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "__version__",
    "clear",
    "get_cache",
    "get_resolver",
    "ipairs",
    "iterate",
    "pairs",
    "render",
    "set_resolver",
]
