"""TemplateCache — compiled templates keyed by identifier.

The cache ties the pipeline together:

    identifier → (miss) → resolver → source → Compiler → Template → cache
    Template + environment → Interpreter → output

A template is compiled once, on first use, and reused until ``clear()``.
Reuse across renders with different environments costs one pass over the
template's expressions to rebind them; reuse with the same environment
object costs nothing.

Thread-Safety:
    None. The cache and the expression bindings of its templates are
    shared mutable state; callers rendering from several threads must
    serialize access themselves.

"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import IO, Any

from xtemplate.compiler import Compiler
from xtemplate.engine.loaders import FileSystemLoader, FunctionLoader, Resolver
from xtemplate.expressions import ExpressionService, PythonExpressionService
from xtemplate.interpreter import Interpreter
from xtemplate.render_context import DEFAULT_MAX_DEPTH, RenderContext
from xtemplate.template import Template

logger = logging.getLogger(__name__)


class TemplateCache:
    """Compile-on-first-use cache of templates, and the render entry point.

    Args:
        resolver: Custom resolver ``(identifier) -> str | None``. While set
            it fully replaces the default loader.
        loader: Default loader, used when no resolver is set. Defaults to
            FileSystemLoader(".") which treats identifiers as paths.
        expressions: Expression service. Defaults to PythonExpressionService().
        prefix: Element namespace, ``x`` for ``<x:if>``.
        max_depth: Deepest allowed template inclusion.

    Example:
            >>> cache = TemplateCache(resolver={"hello": "Hello, ${name}!"}.get)
            >>> cache.render("hello", {"name": "World"})
            'Hello, World!'

    """

    __slots__ = (
        "_compiler",
        "_expressions",
        "_interpreter",
        "_loader",
        "_max_depth",
        "_resolver",
        "_templates",
    )

    def __init__(
        self,
        resolver: Resolver | None = None,
        *,
        loader: FileSystemLoader | FunctionLoader | None = None,
        expressions: ExpressionService | None = None,
        prefix: str = "x",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self._expressions = expressions or PythonExpressionService()
        self._compiler = Compiler(self._expressions, prefix=prefix)
        self._interpreter = Interpreter(self)
        self._loader = loader or FileSystemLoader()
        self._max_depth = max_depth
        self._templates: dict[str, Template] = {}
        self._resolver: FunctionLoader | None = None
        self.resolver = resolver

    @property
    def resolver(self) -> Resolver | None:
        """Custom resolver, or None when the default loader is in use."""
        return self._resolver.func if self._resolver is not None else None

    @resolver.setter
    def resolver(self, resolver: Resolver | None) -> None:
        self._resolver = FunctionLoader(resolver) if resolver is not None else None
        logger.debug("Resolver set to %r", resolver)

    @property
    def expressions(self) -> ExpressionService:
        return self._expressions

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def get_source(self, name: str) -> str:
        """Raw source of ``name`` from the custom resolver or the default loader."""
        loader = self._resolver if self._resolver is not None else self._loader
        return loader.get_source(name)

    def compile(self, name: str, source: str) -> Template:
        """Compile ``source`` without caching it."""
        return Template(name, self._compiler.compile(name, source), source)

    def get_template(self, name: str) -> Template:
        """Return the compiled template for ``name``, compiling it on a miss.

        Raises:
            TemplateNotFoundError: If the resolver has no source for ``name``
            TemplateSyntaxError: If the source does not compile; nothing is cached
        """
        template = self._templates.get(name)
        if template is None:
            template = self.compile(name, self.get_source(name))
            self._templates[name] = template
            logger.debug("Compiled %r (%d instructions)", name, len(template))
        return template

    def clear(self) -> None:
        """Drop every compiled template; later renders recompile from source."""
        count = len(self._templates)
        self._templates = {}
        logger.debug("Cleared %d compiled template(s)", count)

    def render(
        self,
        name: str,
        env: MutableMapping[str, Any],
        out: IO[str] | None = None,
    ) -> str | None:
        """Render template ``name`` against ``env``.

        Args:
            name: Template identifier
            env: Variable scope; receives names assigned by <x:set/> and loops
            out: Text sink with a ``write()`` method. Output streams into it
                and nothing is returned.

        Returns:
            The rendered text when ``out`` is None, otherwise None

        Raises:
            TypeError: If ``env`` is not a mutable mapping
            TemplateSyntaxError: If a template fails to compile
            RenderError: If rendering fails; output already streamed to
                ``out`` stays written
        """
        if not isinstance(env, MutableMapping):
            raise TypeError(f"environment must be a mutable mapping, not {type(env).__name__}")
        ctx = RenderContext(template_name=name, max_depth=self._max_depth)
        if out is not None:
            self._interpreter.render(name, env, out.write, ctx)
            return None
        buf: list[str] = []
        self._interpreter.render(name, env, buf.append, ctx)
        return "".join(buf)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"<TemplateCache ({len(self._templates)} templates)>"
