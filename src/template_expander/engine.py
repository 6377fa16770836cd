from collections.abc import Callable, Mapping
from typing import Any

import orjson
from jinja2 import Environment, StrictUndefined, Undefined
from jinja2.sandbox import SandboxedEnvironment

DEFAULT_CONFIG: dict[str, Any] = {
    "keep_trailing_newline": True,
    "autoescape": False,
}


def dump_json(value: Any) -> str:
    """Serialize a value to 2-space indented JSON text for embedding in templates."""
    return orjson.dumps(
        value,
        option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS,
    ).decode("utf-8")


def default_helpers() -> dict[str, Callable[..., Any]]:
    """Helpers every engine gets unless the caller replaces them."""
    return {"json": dump_json}


def create_environment(
    config: dict[str, Any] | None = None,
    use_sandbox: bool = True,
    additional_globals: dict[str, Any] | None = None,
    additional_filters: dict[str, Callable] | None = None,
    additional_tests: dict[str, Callable] | None = None,
) -> Environment:
    """Create a Jinja2 environment for expanding template files.

    Args:
        config: Keyword arguments for the environment, layered over DEFAULT_CONFIG
        use_sandbox: Use ``SandboxedEnvironment`` (default True)
        additional_globals: Extra functions/values visible to every template
        additional_filters: Extra filters
        additional_tests: Extra tests

    Returns:
        A configured environment. Nothing is registered process-wide.
    """
    options = dict(DEFAULT_CONFIG)
    if config:
        options.update(config)

    env_class = SandboxedEnvironment if use_sandbox else Environment
    env = env_class(**options)

    if additional_globals:
        env.globals.update(additional_globals)
    if additional_filters:
        env.filters.update(additional_filters)
    if additional_tests:
        env.tests.update(additional_tests)
    return env


class ExpansionEngine:
    """Text substitution used to expand template files.

    Accepts a template string and a data object and returns the expanded string.
    Malformed templates raise the underlying ``jinja2`` error; callers wrap it
    with file context.

    Helpers are passed at construction time. By default ``json`` is available
    both as a filter and as a function::

        engine = ExpansionEngine()
        engine.render("{{ cfg | json }}", {"cfg": {"a": 1}})
        engine.render("{{ json(cfg) }}", {"cfg": {"a": 1}})

    With ``strict=True`` referencing an undefined variable is an error instead of
    rendering as an empty string.
    """

    def __init__(
        self,
        strict: bool = False,
        use_sandbox: bool = True,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        globals: Mapping[str, Any] | None = None,
    ):
        self.strict = strict
        self.use_sandbox = use_sandbox
        self.filters = dict(default_helpers() if filters is None else filters)
        self.globals = dict(default_helpers() if globals is None else globals)
        self._env = create_environment(
            config={"undefined": StrictUndefined if strict else Undefined},
            use_sandbox=use_sandbox,
            additional_globals=self.globals,
            additional_filters=self.filters,
        )
        self._crlf_env = self._env.overlay(newline_sequence="\r\n")

    @property
    def environment(self) -> Environment:
        return self._env

    def _environment_for(self, template_text: str) -> Environment:
        crlf = template_text.count("\r\n")
        lf = template_text.count("\n") - crlf
        return self._crlf_env if crlf > lf else self._env

    def render(self, template_text: str, data: Any = None) -> str:
        """Expand ``template_text`` against ``data``.

        Jinja2 rewrites every line ending to a single newline sequence. The
        output uses the ending the source uses most (``\\n`` on a tie), so files
        with consistent endings round-trip exactly and mixed files come out
        normalised.
        """
        template = self._environment_for(template_text).from_string(template_text)
        if data is None:
            return template.render()
        return template.render(data)

    def __repr__(self) -> str:
        return (
            f"ExpansionEngine(strict={self.strict}, use_sandbox={self.use_sandbox}, "
            f"helpers={sorted(set(self.filters) | set(self.globals))})"
        )
