"""
Jinja2 rendering for the HTML fragments liveform sends to HTMX clients.

Templates live in ``templates/`` next to this module and are autoescaped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

_env: Environment | None = None


def create_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def get_jinja_env() -> Environment:
    """Get the shared Jinja2 environment (lazy singleton)."""
    global _env
    if _env is None:
        _env = create_jinja_env()
    return _env


def render_fragment(template_name: str, **kwargs: Any) -> str:
    """Render an HTML fragment, e.g. ``fragments/form_errors.html``."""
    return get_jinja_env().get_template(template_name).render(**kwargs)
