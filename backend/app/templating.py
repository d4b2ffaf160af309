from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

_env: Environment | None = None


def get_template_env() -> Environment:
    """Return the shared Jinja2 environment for emails and pages."""
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
    return _env


def render(template_name: str, **context: Any) -> str:
    """Render a template by path relative to the templates directory."""
    return get_template_env().get_template(template_name).render(**context)
