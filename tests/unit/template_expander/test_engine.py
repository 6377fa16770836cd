import pytest
from jinja2 import TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment
from template_expander import ExpansionEngine, create_environment, dump_json


class TestCreateEnvironment:
    """Test the environment factory."""

    def test_sandboxed_by_default(self):
        assert isinstance(create_environment(), SandboxedEnvironment)

    def test_unsandboxed(self):
        assert not isinstance(
            create_environment(use_sandbox=False), SandboxedEnvironment
        )

    def test_keeps_trailing_newline(self):
        env = create_environment()
        assert env.from_string("a {{ x }}\n").render(x=1) == "a 1\n"

    def test_additional_filters_and_globals(self):
        env = create_environment(
            additional_filters={"shout": str.upper},
            additional_globals={"greeting": "hi"},
        )
        assert env.from_string("{{ greeting | shout }}").render() == "HI"

    def test_environments_are_independent(self):
        first = create_environment(additional_filters={"shout": str.upper})
        second = create_environment()
        assert "shout" in first.filters
        assert "shout" not in second.filters


class TestExpansionEngine:
    """Test rendering through the engine."""

    def test_substitution(self):
        engine = ExpansionEngine()
        assert engine.render("MSG: {{msg}}", {"msg": "Hello computer"}) == (
            "MSG: Hello computer"
        )

    def test_none_data(self):
        assert ExpansionEngine().render("static", None) == "static"

    def test_missing_variable_renders_empty(self):
        assert ExpansionEngine().render("a{{ missing }}b", {}) == "ab"

    def test_strict_missing_variable(self):
        with pytest.raises(UndefinedError):
            ExpansionEngine(strict=True).render("{{ missing }}", {})

    def test_syntax_error(self):
        with pytest.raises(TemplateSyntaxError):
            ExpansionEngine().render("this {{won't}} be expanded!!", {})

    def test_preserves_line_endings(self):
        text = "<html>\r\n    <body>\r\n        {{msg}}\r\n    </body>\r\n</html>"
        result = ExpansionEngine().render(text, {"msg": "Hello computer"})
        assert result == (
            "<html>\r\n    <body>\r\n        Hello computer\r\n    </body>\r\n</html>"
        )

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("a\r\nb\r\n{{x}}\n", "a\r\nb\r\nX\r\n"),
            ("a\nb\n{{x}}\r\n", "a\nb\nX\n"),
            ("a\r\n{{x}}\n", "a\nX\n"),
        ],
    )
    def test_mixed_line_endings_use_dominant_ending(self, text, expected):
        assert ExpansionEngine().render(text, {"x": "X"}) == expected

    def test_crlf_in_data_is_kept(self):
        result = ExpansionEngine().render("{{x}}\n", {"x": "a\r\nb"})
        assert result == "a\r\nb\n"

    def test_json_filter(self):
        result = ExpansionEngine().render("{{ cfg | json }}", {"cfg": {"a": [1, 2]}})
        assert result == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_json_function(self):
        result = ExpansionEngine().render("{{ json(cfg) }}", {"cfg": {"a": 1}})
        assert result == '{\n  "a": 1\n}'

    def test_custom_helpers_replace_defaults(self):
        engine = ExpansionEngine(filters={"shout": str.upper}, globals={})
        assert engine.render("{{ 'x' | shout }}") == "X"
        assert "json" not in engine.environment.filters
        assert "json" not in engine.environment.globals

    def test_helpers_are_per_engine(self):
        custom = ExpansionEngine(filters={"shout": str.upper})
        default = ExpansionEngine()
        assert "shout" in custom.environment.filters
        assert "shout" not in default.environment.filters


class TestDumpJson:
    """Test the JSON helper."""

    def test_indented(self):
        assert dump_json({"b": 1}) == '{\n  "b": 1\n}'

    def test_scalar(self):
        assert dump_json("text") == '"text"'

    def test_non_string_keys(self):
        assert dump_json({1: "a"}) == '{\n  "1": "a"\n}'
