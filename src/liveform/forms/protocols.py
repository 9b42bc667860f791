"""
Form engine contract consumed by the hydration controller.

Any form library can back a live component as long as its form objects
satisfy ``FormInstance``. Nodes that can drop their validation errors also
implement ``ClearableErrors``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

from liveform.forms.view import FormView


@runtime_checkable
class FormInstance(Protocol):
    """A live, engine-side form holding fields, submitted data and errors."""

    name: str

    def submit(self, data: Any) -> None: ...

    def is_submitted(self) -> bool: ...

    def is_valid(self) -> bool: ...

    def create_view(self) -> FormView: ...

    def __iter__(self) -> Iterator[FormInstance]: ...


@runtime_checkable
class ClearableErrors(Protocol):
    """A form node whose validation errors can be cleared."""

    def clear_errors(self, recursive: bool = False) -> None: ...
