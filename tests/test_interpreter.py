"""Interpreter and RenderContext tests below the cache."""

from __future__ import annotations

import pytest

from xtemplate import (
    Compiler,
    IncludeDepthError,
    Interpreter,
    PythonExpressionService,
    RenderContext,
    Template,
)


class DictProvider:
    """Compiles templates from a dict on every request."""

    def __init__(self, sources: dict[str, str]):
        self.compiler = Compiler(PythonExpressionService())
        self.sources = sources
        self.requests: list[str] = []

    def get_template(self, name: str) -> Template:
        self.requests.append(name)
        return Template(name, self.compiler.compile(name, self.sources[name]))


def run(provider: DictProvider, name: str, env: dict) -> str:
    buf: list[str] = []
    Interpreter(provider).render(name, env, buf.append, RenderContext(name))
    return "".join(buf)


class TestInterpreter:
    def test_render_through_provider(self) -> None:
        provider = DictProvider({"a": "<${x}>"})
        assert run(provider, "a", {"x": "<"}) == "<&lt;>"
        assert provider.requests == ["a"]

    def test_execute_prebound_template(self) -> None:
        compiler = Compiler(PythonExpressionService())
        template = Template("t", compiler.compile("t", "${a}${b}"))
        env = {"a": "1", "b": "2"}
        template.bind(env)
        buf: list[str] = []
        Interpreter(DictProvider({})).execute(template, env, buf.append, RenderContext("t"))
        assert buf == ["1", "2"]

    def test_empty_strings_are_not_written(self) -> None:
        provider = DictProvider({"t": "${a}$[n]{b}${c}"})
        buf: list[str] = []
        Interpreter(provider).render("t", {"a": "", "c": "x"}, buf.append, RenderContext("t"))
        assert buf == ["x"]

    def test_loop_state_is_per_template(self) -> None:
        provider = DictProvider(
            {
                "outer": '<x:for names="_, v" in="ipairs(items)"><x:include filename="\'inner\'"/></x:for>',
                "inner": '<x:for names="_, w" in="ipairs(v)">${w}</x:for>;',
            }
        )
        assert run(provider, "outer", {"items": [[1, 2], [3]]}) == "12;3;"

    def test_include_resolved_on_each_pass(self) -> None:
        provider = DictProvider(
            {
                "outer": '<x:for names="_, v" in="ipairs(items)"><x:include filename="\'inner\'"/></x:for>',
                "inner": "${v}",
            }
        )
        run(provider, "outer", {"items": ["a", "b"]})
        assert provider.requests == ["outer", "inner", "inner"]


class TestRenderContext:
    def test_child_context(self) -> None:
        ctx = RenderContext("page", max_depth=4)
        child = ctx.child_context("part", 7)
        assert child.depth == 2
        assert child.max_depth == 4
        assert child.template_name == "part"
        assert child.template_stack == [("page", 7)]
        assert ctx.template_stack == []

    def test_check_depth(self) -> None:
        ctx = RenderContext("a", max_depth=2)
        ctx.check_depth()
        ctx.child_context("b", 1).check_depth()
        with pytest.raises(IncludeDepthError, match="depth exceeds 2"):
            ctx.child_context("b", 1).child_context("c", 1).check_depth()
