"""
Form view tree.

A ``FormView`` is the rendering-facing projection of a form instance: one node
per field, mirroring the field structure, carrying the current view value,
validation errors and a mutable attribute map for markup hints.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class FormView:
    """One node of a form view tree."""

    name: str
    full_name: str = ""
    value: Any = None
    label: str | None = None
    widget: str = "text"  # text, checkbox, radio, select, choice, form
    required: bool = False
    expanded: bool = False
    checked: bool | None = None  # None means the node has no checked flag
    children: list[FormView] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    attr: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.full_name:
            self.full_name = self.name

    def __getitem__(self, name: str) -> FormView:
        for child in self.children:
            if child.name == name:
                return child
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(child.name == name for child in self.children)

    def walk(self) -> Iterator[FormView]:
        """Yield every descendant, depth-first pre-order. The node itself is skipped."""
        for child in self.children:
            yield child
            yield from child.walk()

    def copy(self) -> FormView:
        """Return a deep copy that shares no mutable state with this tree."""
        return copy.deepcopy(self)

    def has_errors(self, deep: bool = False) -> bool:
        if self.errors:
            return True
        return deep and any(node.errors for node in self.walk())

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for template contexts."""
        data: dict[str, Any] = {
            "name": self.name,
            "full_name": self.full_name,
            "value": self.value,
            "label": self.label,
            "widget": self.widget,
            "required": self.required,
            "expanded": self.expanded,
            "errors": list(self.errors),
            "attr": dict(self.attr),
            "children": [child.to_dict() for child in self.children],
        }
        if self.checked is not None:
            data["checked"] = self.checked
        return data
