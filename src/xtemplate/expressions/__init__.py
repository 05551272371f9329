"""Expression service used by compiled templates."""

from __future__ import annotations

from xtemplate.expressions.core import (
    Expression,
    ExpressionService,
    PythonExpression,
    PythonExpressionService,
    Scope,
    adjust_results,
    is_truthy,
    type_name,
)

__all__ = [
    "Expression",
    "ExpressionService",
    "PythonExpression",
    "PythonExpressionService",
    "Scope",
    "adjust_results",
    "is_truthy",
    "type_name",
]
