"""Property-based tests for the compiler and renderer.

- Text without constructs renders unchanged, except ``$$`` becomes ``$``
- Arbitrary input either compiles or raises TemplateSyntaxError
- Line numbers agree for every mix of line terminators
- Substituted strings come out exactly as the escape function makes them
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from xtemplate import Compiler, PythonExpressionService, TemplateCache, TemplateSyntaxError
from xtemplate.compiler.text import line_at
from xtemplate.nodes import Raw
from xtemplate.utils.escape import escape_xml

from .strategies import (
    identifier,
    lines_with_breaks,
    literal_template,
    substituted_value,
)

_service = PythonExpressionService()


class TestCompilerProperties:
    @given(source=literal_template)
    @settings(max_examples=200)
    def test_literal_text_roundtrip(self, source: str) -> None:
        cache = TemplateCache({"t": source}.get)
        assert cache.render("t", {}) == source.replace("$$", "$")

    @given(source=literal_template)
    @settings(max_examples=200)
    def test_literal_text_is_raw_only(self, source: str) -> None:
        nodes = Compiler(_service).compile("t", source)
        assert all(isinstance(node, Raw) for node in nodes)

    @given(source=st.text(alphabet='<x:/if cond="a">${}$[]nq \n', max_size=60))
    @settings(max_examples=300)
    def test_no_unhandled_crash(self, source: str) -> None:
        """Malformed input raises TemplateSyntaxError and nothing else."""
        try:
            Compiler(_service).compile("t", source)
        except TemplateSyntaxError:
            pass

    @given(data=lines_with_breaks)
    @settings(max_examples=200)
    def test_substitution_line_numbers(self, data: tuple[list[str], list[str]]) -> None:
        lines, breaks = data
        # One substitution at the end of each line
        parts = []
        for index, line in enumerate(lines):
            safe = line.replace("<", "(").replace("{", "(").replace("}", ")")
            parts.append(f"{safe}${{v{index}}}")
            if index < len(breaks):
                parts.append(breaks[index])
        source = "".join(parts)

        nodes = Compiler(_service).compile("t", source)
        sub_lines = [node.lineno for node in nodes if not isinstance(node, Raw)]
        assert sub_lines == list(range(1, len(lines) + 1))

    @given(data=lines_with_breaks)
    @settings(max_examples=200)
    def test_line_at_counts_each_terminator_once(self, data: tuple[list[str], list[str]]) -> None:
        lines, breaks = data
        # Non-empty lines, so a CR and a following LF never merge into CRLF
        source = "".join(f"{line}." + brk for line, brk in zip(lines, [*breaks, ""]))
        assert line_at(source, len(source)) == len(lines)


class TestRenderProperties:
    @given(name=identifier, value=substituted_value)
    @settings(max_examples=200)
    def test_default_substitution_escapes_xml(self, name: str, value: str) -> None:
        cache = TemplateCache({"t": f"[${{{name}}}]"}.get)
        assert cache.render("t", {name: value}) == f"[{escape_xml(value)}]"

    @given(name=identifier, value=substituted_value)
    @settings(max_examples=200)
    def test_unescaped_substitution_is_verbatim(self, name: str, value: str) -> None:
        cache = TemplateCache({"t": f"$[]{{{name}}}"}.get)
        assert cache.render("t", {name: value}) == value

    @given(values=st.lists(st.integers(), max_size=20))
    @settings(max_examples=100)
    def test_for_visits_every_item(self, values: list[int]) -> None:
        source = '<x:for names="_, v" in="ipairs(values)">${v},</x:for>'
        cache = TemplateCache({"t": source}.get)
        assert cache.render("t", {"values": values}) == "".join(f"{v}," for v in values)
