"""RenderContext — per-render state kept apart from the user environment.

The environment is the template author's variable scope and must only
ever receive the names templates assign. Bookkeeping the interpreter needs
(which template is running, how deep inclusion has gone, the include
chain for error messages) lives here instead.

"""

from __future__ import annotations

from dataclasses import dataclass, field

from xtemplate.engine.exceptions import IncludeDepthError

# Deep enough for real layouts, shallow enough to stop include cycles
# long before the Python stack is at risk.
DEFAULT_MAX_DEPTH = 8


@dataclass(slots=True)
class RenderContext:
    """Per-render state.

    A top-level render starts at depth 1; every include runs in a child
    context one level deeper.

    Attributes:
        template_name: Template currently executing
        depth: Inclusion depth, 1 for the template passed to render()
        max_depth: Deepest allowed inclusion
        template_stack: (template_name, line) of each include leading here
    """

    template_name: str | None = None
    depth: int = 1
    max_depth: int = DEFAULT_MAX_DEPTH
    template_stack: list[tuple[str, int]] = field(default_factory=list)

    def check_depth(self) -> None:
        """Raise IncludeDepthError if this context is nested too deep."""
        if self.depth > self.max_depth:
            raise IncludeDepthError(
                f"template depth exceeds {self.max_depth}",
                template_name=self.template_name,
                template_stack=self.template_stack,
            )

    def child_context(self, template_name: str, line: int) -> RenderContext:
        """Context for a template included from ``line`` of the current one."""
        stack = self.template_stack.copy()
        if self.template_name is not None:
            stack.append((self.template_name, line))
        return RenderContext(
            template_name=template_name,
            depth=self.depth + 1,
            max_depth=self.max_depth,
            template_stack=stack,
        )
