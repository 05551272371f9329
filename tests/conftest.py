"""Pytest configuration and fixtures for xtemplate tests."""

from __future__ import annotations

import pytest

import xtemplate
from xtemplate import PythonExpressionService, TemplateCache

# Mirrors the fixtures the engine has always been exercised with.
TEMPLATES = {
    "test_if": '<x:if cond="cond">True</x:if>',
    "test_if_else": '<x:if cond="cond">True<x:else />False</x:if>',
    "test_if_elseif": '<x:if cond="value == 1">1<x:elseif cond="value == 2"/>2</x:if>',
    "test_if_elseif_else": (
        '<x:if cond="value == 1">1<x:elseif cond="value == 2"/>2<x:else/>3</x:if>'
    ),
    "test_for": '<x:for in="ipairs(values)" names="_, value">${value}</x:for>',
    "test_set": '<x:set names="x" expressions="value"/>${x}',
    "test_include": "include: <x:include filename=\"'test_if'\"/>",
    "test_sub_nil": "${undefined}",
    "test_sub_nilsup": "$[n]{undefined}",
    "test_sub_xml": "$[x]{xml}",
    "test_sub_url": "$[u]{url}",
    "test_sub_js": "$[j]{js}",
}


@pytest.fixture
def templates() -> dict[str, str]:
    """Mutable copy of the template table; tests may add entries."""
    return dict(TEMPLATES)


@pytest.fixture
def cache(templates: dict[str, str]) -> TemplateCache:
    """TemplateCache resolving from the ``templates`` table."""
    return TemplateCache(resolver=templates.get)


@pytest.fixture
def expressions() -> PythonExpressionService:
    return PythonExpressionService()


@pytest.fixture(autouse=True)
def _reset_default_cache():
    """Leave the module-level cache as the next test expects it."""
    yield
    xtemplate.set_resolver(None)
    xtemplate.clear()
