"""Template loaders (resolvers) for the template cache.

A loader maps a template identifier to its raw source text. Loaders
implement ``get_source(name) -> str`` and raise TemplateNotFoundError when
they cannot produce the template.

Built-in Loaders:
- `FileSystemLoader`: Treat the identifier as a path below one or more
  search directories (the working directory by default)
- `FunctionLoader`: Wrap a resolver callable ``(name) -> str | None``

A custom resolver installed with ``set_resolver()`` is wrapped in a
FunctionLoader and fully replaces filesystem resolution until removed.

"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from xtemplate.engine.exceptions import TemplateNotFoundError

Resolver = Callable[[str], "str | None"]


class FileSystemLoader:
    """Load templates from filesystem directories.

    The identifier is joined to each search directory in order and the first
    existing file wins. Absolute identifiers bypass the search directories.

    Example:
            >>> loader = FileSystemLoader()
            >>> loader.get_source("templates/page.html")  # relative to cwd

            >>> loader = FileSystemLoader(["site/", "shared/"])
            >>> loader.get_source("layout.html")

    Raises:
        TemplateNotFoundError: If the template is not found in any search path

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path] = ".",
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def get_source(self, name: str) -> str:
        """Load template source from the filesystem."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                try:
                    return path.read_text(self._encoding)
                except OSError as e:
                    raise TemplateNotFoundError(f"{name}: error reading template: {e}") from e

        raise TemplateNotFoundError(f"{name}: template not found")


class FunctionLoader:
    """Adapt a resolver callable to the loader interface.

    The callable returns the source string, or None when it does not know
    the identifier.

    Example:
            >>> templates = {"hello": "Hello, ${name}!"}
            >>> loader = FunctionLoader(templates.get)
            >>> loader.get_source("hello")
            'Hello, ${name}!'

    """

    __slots__ = ("_func",)

    def __init__(self, func: Resolver):
        if not callable(func):
            raise TypeError(f"resolver must be callable, not {type(func).__name__}")
        self._func = func

    @property
    def func(self) -> Resolver:
        return self._func

    def get_source(self, name: str) -> str:
        source = self._func(name)
        if not isinstance(source, str):
            raise TemplateNotFoundError(f"{name}: error resolving template")
        return source
