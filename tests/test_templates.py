"""Tests for the template engine and the built-in templates."""

import pytest

from notifier.exceptions import TemplateNotFound
from notifier.templates import (
    TEMPLATES,
    apply_card_template,
    apply_template,
    has_template,
    list_template_names,
    render,
)


class TestRender:
    """Variable substitution and conditional blocks."""

    def test_substitutes_variable(self):
        assert render("Hello {{.name}}", {"name": "Ada"}) == "Hello Ada"

    def test_missing_variable_renders_empty(self):
        assert render("Hello {{.name}}!", {}) == "Hello !"

    def test_list_value_is_joined(self):
        assert render("{{.opts}}", {"opts": ["a", "b", "c"]}) == "a, b, c"

    def test_bool_value_is_lowercase(self):
        assert render("{{.ok}}", {"ok": True}) == "true"

    def test_conditional_kept_when_truthy(self):
        assert render("a{{if .x}}[{{.x}}]{{end}}b", {"x": 1}) == "a[1]b"

    def test_conditional_dropped_when_falsy(self):
        assert render("a{{if .x}}[{{.x}}]{{end}}b", {"x": ""}) == "ab"

    def test_conditional_dropped_when_missing(self):
        assert render("a{{if .x}}X{{end}}b", {}) == "ab"

    def test_stray_end_is_removed(self):
        assert render("a{{end}}b", {}) == "ab"

    def test_unterminated_block_keeps_text(self):
        assert render("a{{if .x}}b", {}) == "ab"

    def test_sequential_blocks(self):
        text = "{{if .a}}A{{end}}-{{if .b}}B{{end}}"
        assert render(text, {"a": True, "b": False}) == "A-"

    def test_end_tag_in_value_is_kept(self):
        assert render("Status: {{.status}}", {"status": "a{{end}}b"}) == "Status: a{{end}}b"

    def test_if_tag_in_value_is_kept(self):
        data = {"details": "{{if .x}}hidden{{end}}"}
        assert render("Details: {{.details}}", data) == "Details: {{if .x}}hidden{{end}}"

    def test_value_with_markup_inside_kept_block(self):
        text = "a{{if .x}}[{{.x}}]{{end}}b"
        assert render(text, {"x": "1{{end}}2"}) == "a[1{{end}}2]b"

    def test_value_with_markup_inside_dropped_block(self):
        text = "a{{if .x}}[{{.y}}]{{end}}b"
        assert render(text, {"x": False, "y": "{{end}}"}) == "ab"

    def test_malformed_variable_left_alone(self):
        assert render("{{.not a key}}", {}) == "{{.not a key}}"

    def test_empty_text(self):
        assert render(None, {"x": 1}) == ""
        assert render("", {"x": 1}) == ""


class TestBuiltinTemplates:
    """The four built-in templates."""

    def test_names(self):
        assert list_template_names() == ["status", "question", "progress", "problem"]
        assert has_template("status")
        assert not has_template("nope")
        assert not has_template(None)

    @pytest.mark.parametrize("name", list(TEMPLATES))
    def test_no_markup_left_with_empty_data(self, name):
        applied = apply_template(name, {})
        assert "{{" not in applied.title
        assert "{{" not in applied.message

    def test_status(self):
        applied = apply_template("status", {"status": "success", "details": "all green"})
        assert applied.title == "Status Update: success"
        assert "Status: success" in applied.message
        assert "Details: all green" in applied.message
        assert "Component" not in applied.message

    def test_progress_percentage(self):
        applied = apply_template(
            "progress", {"title": "Build", "current": 3, "total": 4, "percentage": 75}
        )
        assert "Progress: 3/4 (75%)" in applied.message

    def test_question_options(self):
        applied = apply_template("question", {"question": "Ship?", "options": ["yes", "no"]})
        assert applied.title == "Question: Ship?"
        assert "Options: yes, no" in applied.message

    def test_unknown_template(self):
        with pytest.raises(TemplateNotFound) as exc:
            apply_template("nope", {})
        assert exc.value.name == "nope"
        assert isinstance(exc.value, LookupError)

    def test_card_variant_is_trimmed(self):
        applied = apply_card_template("status", {"status": "ok"})
        assert applied.message == applied.message.strip()
        assert applied.message.startswith("Status: ok")
