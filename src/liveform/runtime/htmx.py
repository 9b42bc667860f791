"""
HTMX responses for component errors.

Validation failures on HTMX requests are answered with a rendered error list
swapped into ``#form-errors`` and a toast event, instead of JSON.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi.responses import HTMLResponse

from liveform.runtime.template_renderer import render_fragment

ERRORS_TARGET = "#form-errors"


def is_htmx_request(request: Any) -> bool:
    """True when the request was issued by htmx (``HX-Request: true``)."""
    headers = getattr(request, "headers", None)
    if headers is None:
        return False
    return headers.get("HX-Request") == "true"


def htmx_error_response(
    errors: list[str],
    *,
    status_code: int = 422,
    title: str = "Validation Error",
) -> HTMLResponse:
    """Render ``errors`` into the form error container."""
    html = render_fragment("fragments/form_errors.html", errors=errors, title=title)
    toast = {"showToast": {"message": "Please fix the errors below", "type": "error"}}
    return HTMLResponse(
        content=html,
        status_code=status_code,
        headers={
            "HX-Retarget": ERRORS_TARGET,
            "HX-Reswap": "innerHTML",
            "HX-Trigger": json.dumps(toast),
        },
    )
