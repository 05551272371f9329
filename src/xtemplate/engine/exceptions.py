"""Exceptions for the xtemplate engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Resolver could not produce template source
├── TemplateSyntaxError       # Compile-time error, aborts compilation
└── RenderError               # Render-time error, aborts the render call
    └── IncludeDepthError     # Inclusion nested deeper than allowed

ExpressionError is raised by the expression service only. The compiler
turns it into TemplateSyntaxError, the interpreter into RenderError.

Example:
    ```
    Syntax Error: missing attribute 'cond'
      --> page.html:3
       |
      3 | <x:if>
    ```

"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Searchable error codes for template errors.

    Format: X-{CATEGORY}-{NUMBER}
    Categories: PAR (compiler), RUN (interpreter), TPL (template loading)
    """

    # Compiler errors (X-PAR-xxx)
    MALFORMED_ELEMENT = "X-PAR-001"
    UNKNOWN_ELEMENT = "X-PAR-002"
    MISSING_ATTRIBUTE = "X-PAR-003"
    UNBALANCED_BLOCK = "X-PAR-004"
    MALFORMED_SUBSTITUTION = "X-PAR-005"
    BAD_FLAGS = "X-PAR-006"
    INVALID_EXPRESSION = "X-PAR-007"

    # Runtime errors (X-RUN-xxx)
    EVALUATION_ERROR = "X-RUN-001"
    INCLUDE_DEPTH = "X-RUN-002"
    WRITE_ERROR = "X-RUN-003"

    # Template loading errors (X-TPL-xxx)
    TEMPLATE_NOT_FOUND = "X-TPL-001"

    @property
    def category(self) -> str:
        """Error category ('compiler', 'runtime' or 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "compiler",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


class ExpressionError(Exception):
    """The expression service rejected a source fragment."""


class TemplateError(Exception):
    """Base exception for all template errors.

    Attributes:
        code: ErrorCode identifying the failure class.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a one-header summary prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """The resolver produced no source for a template identifier."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Compile-time error in template source.

    Carries the template identifier and the 1-based line of the offending
    construct. When ``source`` is given the message includes that line.
    """

    code: ErrorCode | None = ErrorCode.MALFORMED_ELEMENT

    def __init__(
        self,
        message: str,
        lineno: int,
        name: str | None = None,
        source: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = f"{self.name or '<template>'}:{self.lineno}"
        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                return f"{header}\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"

        return header

    def format_compact(self) -> str:
        code_prefix = f"{self.code.value}: " if self.code else ""
        return f"{code_prefix}{self.name or '<template>'}:{self.lineno}: {self.message}"


class RenderError(TemplateError):
    """Render-time error.

    Output Format:
            ```
            Render Error: division by zero
              Location: page.html:4
              Expression: ${total / count}
              Template stack:
                • layout.html:12
            ```

    Attributes:
        message: Error description
        template_name: Template being executed when the error occurred
        lineno: Line of the failing instruction
        expression: Source of the expression that failed
        template_stack: (template_name, line) pairs of the include chain
    """

    code: ErrorCode | None = ErrorCode.EVALUATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        expression: str | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.expression = expression
        self.template_stack = template_stack or []
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {loc}")

        if self.expression:
            parts.append(f"  Expression: {self.expression}")

        if self.template_stack:
            parts.append("  Template stack:")
            for name, line in self.template_stack:
                parts.append(f"    • {name}:{line}")

        return "\n".join(parts)


class IncludeDepthError(RenderError):
    """Inclusion nested deeper than the configured maximum."""

    code: ErrorCode | None = ErrorCode.INCLUDE_DEPTH
