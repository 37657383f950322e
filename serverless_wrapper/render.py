"""Stub rendering for wrapped handlers.

The lifecycle only needs a callable `renderer(variables, *, family=...)` that
returns source text (or an awaitable of it). `JinjaRenderer` is the default
implementation, backed by the templates shipped in this package.
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Mapping, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from serverless_wrapper.errors import WrapperError
from serverless_wrapper.runtimes import PYTHON, RuntimeFamily

TEMPLATE_VARIABLES = ("orig_handler_path", "wrapper_path", "handler_name")


class RenderError(WrapperError):
    """Raised when a stub template cannot be rendered."""


class Renderer(Protocol):
    def __call__(
        self, variables: Mapping[str, str], *, family: RuntimeFamily
    ) -> str | Awaitable[str]: ...


def _require_path_filter(value: str) -> str:
    # Node resolves bare names as packages, so local paths need a leading ./
    if value.startswith(("./", "../", "/")):
        return value
    return f"./{value}"


class JinjaRenderer:
    """Render wrapped-handler stubs from Jinja2 templates."""

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self.template_dir = Path(template_dir)

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.env.filters["require_path"] = _require_path_filter

    def __call__(self, variables: Mapping[str, str], *, family: RuntimeFamily = PYTHON) -> str:
        missing = [k for k in TEMPLATE_VARIABLES if not variables.get(k)]
        if missing:
            raise RenderError(f"Missing template variables: {', '.join(missing)}")

        try:
            template = self.env.get_template(family.template)
            return template.render(**variables)
        except TemplateError as exc:
            raise RenderError(f"Failed to render {family.template}: {exc}") from exc
