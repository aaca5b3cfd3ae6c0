"""Tests for the Jinja2 renderer."""

from dataclasses import dataclass

import pytest

from pgschemagen.exceptions import RenderError
from pgschemagen.generators.bindings import Bindings, DocEnum, EnumDocBindings
from pgschemagen.render import JinjaRenderer


@dataclass(frozen=True)
class NameBindings(Bindings):
    name: str


class TestJinjaRenderer:
    def test_render(self, tmp_path):
        (tmp_path / "hello.j2").write_text("Hello {{ name }}!\n")
        renderer = JinjaRenderer(tmp_path)
        assert renderer.render("hello", NameBindings(name="db")) == "Hello db!\n"

    def test_filters(self, tmp_path):
        (tmp_path / "f.j2").write_text(
            "{{ name | upper_camel }} {{ name | lower_camel }} "
            "{{ name | upper_snake }} {{ name | underline }}"
        )
        result = JinjaRenderer(tmp_path).render("f", NameBindings(name="foo_bar"))
        assert result == "FooBar fooBar FOO_BAR ======="

    def test_nested_bindings(self, tmp_path):
        (tmp_path / "e.j2").write_text(
            "{% for m in members %}{{ m.name }}={{ m.values | join(',') }};{% endfor %}"
        )
        bindings = EnumDocBindings(
            generated_at="now",
            members=(DocEnum(name="mood", comment="", values=("a", "b")),),
        )
        assert JinjaRenderer(tmp_path).render("e", bindings) == "mood=a,b;"

    def test_missing_template(self, tmp_path):
        with pytest.raises(RenderError) as exc_info:
            JinjaRenderer(tmp_path).render("class", NameBindings(name="x"))
        assert exc_info.value.template_name == "class"
        assert "not found" in str(exc_info.value)

    def test_undefined_variable(self, tmp_path):
        (tmp_path / "bad.j2").write_text("{{ missing }}")
        with pytest.raises(RenderError, match="failed to render template 'bad'"):
            JinjaRenderer(tmp_path).render("bad", NameBindings(name="x"))

    def test_syntax_error(self, tmp_path):
        (tmp_path / "broken.j2").write_text("{% for x in %}")
        with pytest.raises(RenderError, match="invalid"):
            JinjaRenderer(tmp_path).render("broken", NameBindings(name="x"))


class TestBindingsContext:
    def test_top_level_fields(self):
        member = DocEnum(name="mood", comment="", values=())
        context = EnumDocBindings(generated_at="t", members=(member,)).context()
        assert context == {"generated_at": "t", "members": (member,)}
        assert context["members"][0] is member
