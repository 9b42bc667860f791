"""
Exception handlers for applications hosting live form components.

- UnprocessableInput: form validation failed under a strict policy (422)
- ComponentError: the client broke the component contract (400)

HTMX-aware: validation failures on HTMX requests return an error fragment
retargeted at ``#form-errors`` instead of JSON.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from liveform.errors import ComponentError, UnprocessableInput
from liveform.runtime.htmx import htmx_error_response, is_htmx_request


def register_exception_handlers(app: FastAPI) -> None:
    """Register the liveform exception handlers on a FastAPI application."""

    @app.exception_handler(UnprocessableInput)
    async def unprocessable_input_handler(request: Request, exc: UnprocessableInput) -> Response:
        """Convert failed form validation to 422 Unprocessable Entity."""
        messages = exc.errors or [exc.message]
        if is_htmx_request(request):
            return htmx_error_response(messages, status_code=exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": messages, "message": exc.message, "type": "unprocessable_input"},
        )

    @app.exception_handler(ComponentError)
    async def component_error_handler(request: Request, exc: ComponentError) -> Response:
        """Convert component contract violations to 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "type": "component_error"},
        )
