"""
Client binding triggers for form fields.

``ModelBehavior`` decides when the client should treat a field change as
meaningful. The resulting directive is written into each field's
``data-model`` attribute as ``<trigger>|<field full name>``.
"""

from __future__ import annotations

from liveform.config import get_config

TRIGGER_SEPARATOR = "|"


class ModelBehavior:
    """
    Per-field trigger expressions with a default fallback.

    Example:
        behavior = ModelBehavior().default("on(change)").field("user[name]", "on(input)")
        behavior.trigger_for("user[name]")   # "on(input)|user[name]"
        behavior.trigger_for("user[email]")  # "on(change)|user[email]"
    """

    def __init__(self, default_trigger: str | None = None):
        self.default_trigger = (
            default_trigger if default_trigger is not None else get_config().default_trigger
        )
        self.fields: dict[str, str] = {}

    def default(self, trigger: str) -> ModelBehavior:
        self.default_trigger = trigger
        return self

    def field(self, name: str, trigger: str) -> ModelBehavior:
        self.fields[name] = trigger
        return self

    def trigger_for(self, name: str) -> str:
        trigger = self.fields.get(name, self.default_trigger)
        return f"{trigger}{TRIGGER_SEPARATOR}{name}"

    def __repr__(self) -> str:
        return f"ModelBehavior(default={self.default_trigger!r}, fields={self.fields!r})"
