"""
Error types for live form components.
"""

from __future__ import annotations

from typing import Any


class LiveFormError(Exception):
    """Base exception for all liveform errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({details})"
        return self.message


class UnprocessableInput(LiveFormError):
    """
    Raised when a form fails validation under a policy that demands strictness.

    Examples:
    - Any invalid submission in ``early`` validation mode
    - An invalid submission in ``late`` mode after an explicit submit action

    The request layer translates it into a 422 Unprocessable Entity response.
    """

    status_code = 422

    def __init__(
        self,
        message: str = "Form validation failed in component",
        errors: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.errors = list(errors or [])
        super().__init__(message, context)


class ComponentError(LiveFormError):
    """
    Raised when a caller breaks the live component contract.

    Examples:
    - Mount data with a key that is not a prop or attribute
    - A client update to a prop that is not writable
    - Calling a method that is not marked as a live action
    """

    pass
