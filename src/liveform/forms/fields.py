"""
Reference form engine.

A small field tree that satisfies the ``FormInstance`` protocol. Scalar input
is validated with a pydantic ``TypeAdapter`` for the field's declared type;
a ``Form`` can additionally validate its whole payload against a pydantic
model, mapping model errors back onto fields by location.

Example:
    >>> form = Form(
    ...     "registration",
    ...     [
    ...         Field("email", required=True),
    ...         Field("age", int),
    ...         CheckboxField("newsletter"),
    ...     ],
    ... )
    >>> form.submit({"email": "ada@example.com", "age": "36", "newsletter": "1"})
    >>> form.data
    {'email': 'ada@example.com', 'age': 36, 'newsletter': True}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from liveform.errors import LiveFormError
from liveform.forms.view import FormView

logger = logging.getLogger(__name__)

BLANK_MESSAGE = "This value should not be blank."
INVALID_CHOICE_MESSAGE = "The selected choice is invalid."
EXTRA_FIELDS_MESSAGE = "This form should not contain extra fields."
INVALID_FORM_MESSAGE = "This value is not valid."


class Field:
    """A scalar input field."""

    widget = "text"

    def __init__(
        self,
        name: str,
        type_: Any = str,
        *,
        required: bool = False,
        default: Any = None,
        label: str | None = None,
        trim: bool = True,
    ):
        self.name = name
        self.type_ = type_
        self.required = required
        self.label = label if label is not None else name.replace("_", " ").capitalize()
        self.trim = trim
        self.parent: Form | None = None
        self.errors: list[str] = []
        self._submitted = False
        self._adapter: TypeAdapter[Any] = TypeAdapter(type_)
        self.set_data(default)

    @property
    def full_name(self) -> str:
        """Bracketed path as rendered in the ``name`` attribute, e.g. ``user[address][city]``."""
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name}[{self.name}]"

    @property
    def data(self) -> Any:
        return self._data

    def set_data(self, value: Any) -> None:
        """Set the initial (model) value before submission."""
        self._data = value
        self._view_value = "" if value is None else value

    def submit(self, raw: Any) -> None:
        self._submitted = True
        self.errors = []
        if isinstance(raw, str) and self.trim:
            raw = raw.strip()
        self._view_value = "" if raw is None else raw

        if raw is None or raw == "":
            self._data = None
            if self.required:
                self.errors.append(BLANK_MESSAGE)
            return

        try:
            self._data = self._adapter.validate_python(raw)
        except PydanticValidationError as exc:
            self._data = None
            self.errors.extend(err["msg"] for err in exc.errors())

    def is_submitted(self) -> bool:
        return self._submitted

    def has_errors(self) -> bool:
        return bool(self.errors)

    def is_valid(self) -> bool:
        return self._submitted and not self.has_errors()

    def clear_errors(self, recursive: bool = False) -> None:
        self.errors = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def create_view(self) -> FormView:
        return FormView(
            name=self.name,
            full_name=self.full_name,
            value=self._view_value,
            label=self.label,
            widget=self.widget,
            required=self.required,
            errors=list(self.errors),
        )

    def __iter__(self) -> Iterator[Field]:
        return iter(())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.full_name!r})"


class CheckboxField(Field):
    """A boolean input. Any submitted value other than ``None``/``False`` checks it."""

    widget = "checkbox"

    def __init__(
        self,
        name: str,
        *,
        value: str = "1",
        default: bool = False,
        required: bool = False,
        label: str | None = None,
    ):
        self.value = value
        super().__init__(name, bool, required=required, default=default, label=label)

    def set_data(self, value: Any) -> None:
        self._data = bool(value)
        self._view_value = self.value

    def submit(self, raw: Any) -> None:
        self._submitted = True
        self.errors = []
        self._data = raw is not None and raw is not False
        self._view_value = self.value
        if self.required and not self._data:
            self.errors.append(BLANK_MESSAGE)

    def create_view(self) -> FormView:
        view = super().create_view()
        view.checked = bool(self._data)
        return view


class ChoiceField(Field):
    """
    A choice among fixed values.

    Collapsed choices render as a single select. Expanded choices render one
    radio (or checkbox, when ``multiple``) child per option; their view value
    is already in submission shape, so extraction must not recurse into them.
    """

    def __init__(
        self,
        name: str,
        choices: Mapping[str, str] | Sequence[str],
        *,
        expanded: bool = False,
        multiple: bool = False,
        required: bool = False,
        default: Any = None,
        label: str | None = None,
    ):
        if isinstance(choices, Mapping):
            self.choices = {str(value): str(text) for value, text in choices.items()}
        else:
            self.choices = {str(value): str(value) for value in choices}
        self.expanded = expanded
        self.multiple = multiple
        super().__init__(name, str, required=required, default=default, label=label)

    @property
    def widget(self) -> str:  # type: ignore[override]
        return "choice" if self.expanded else "select"

    def set_data(self, value: Any) -> None:
        if self.multiple:
            self._data = [str(v) for v in (value or [])]
            self._view_value = list(self._data)
        else:
            self._data = None if value is None else str(value)
            self._view_value = "" if value is None else str(value)

    def submit(self, raw: Any) -> None:
        self._submitted = True
        self.errors = []
        if self.multiple:
            self._submit_many(raw)
        else:
            self._submit_one(raw)

    def _submit_one(self, raw: Any) -> None:
        if raw is None or raw == "":
            self._data = None
            self._view_value = ""
            if self.required:
                self.errors.append(BLANK_MESSAGE)
            return
        value = str(raw)
        self._view_value = value
        if value not in self.choices:
            self._data = None
            self.errors.append(INVALID_CHOICE_MESSAGE)
            return
        self._data = value

    def _submit_many(self, raw: Any) -> None:
        if raw is None:
            values: list[str] = []
        elif isinstance(raw, (list, tuple)):
            values = [str(v) for v in raw if v is not None]
        else:
            values = [str(raw)]
        self._view_value = values
        self._data = [v for v in values if v in self.choices]
        if len(self._data) != len(values):
            self.errors.append(INVALID_CHOICE_MESSAGE)
        if self.required and not values:
            self.errors.append(BLANK_MESSAGE)

    def create_view(self) -> FormView:
        view = super().create_view()
        view.expanded = self.expanded
        if not self.expanded:
            return view

        selected = self._view_value if self.multiple else [self._view_value]
        child_name = f"{self.full_name}[]" if self.multiple else self.full_name
        for index, (value, text) in enumerate(self.choices.items()):
            view.children.append(
                FormView(
                    name=str(index),
                    full_name=child_name,
                    value=value,
                    label=text,
                    widget="checkbox" if self.multiple else "radio",
                    checked=value in selected,
                )
            )
        return view


class Form(Field):
    """
    A compound field: an ordered collection of child fields.

    The top-level form of a component is a ``Form`` without a parent. Passing
    ``model`` validates the whole payload against a pydantic model once every
    child is individually valid; model errors are attached to the field named
    by the error location, or to the form itself.
    """

    widget = "form"

    def __init__(
        self,
        name: str,
        fields: Iterable[Field] = (),
        *,
        model: type[BaseModel] | None = None,
        data: Mapping[str, Any] | None = None,
        label: str | None = None,
        required: bool = False,
    ):
        self.children: dict[str, Field] = {}
        self.model = model
        self._model_instance: BaseModel | None = None
        super().__init__(name, dict, required=required, label=label)
        for child in fields:
            self.add(child)
        if data:
            self.set_data(data)

    def add(self, child: Field) -> Form:
        if self._submitted:
            raise LiveFormError("Cannot add fields to a submitted form", {"form": self.name})
        child.parent = self
        self.children[child.name] = child
        return self

    def __iter__(self) -> Iterator[Field]:
        return iter(self.children.values())

    def __getitem__(self, name: str) -> Field:
        return self.children[name]

    def __contains__(self, name: object) -> bool:
        return name in self.children

    @property
    def data(self) -> Any:
        if self._model_instance is not None:
            return self._model_instance
        return {name: child.data for name, child in self.children.items()}

    def set_data(self, value: Any) -> None:
        self._view_value = None
        if not value:
            return
        for name, child_value in value.items():
            if name in self.children:
                self.children[name].set_data(child_value)

    def submit(self, raw: Any) -> None:
        if self.parent is None and self._submitted:
            raise LiveFormError("A form can only be submitted once", {"form": self.name})
        self._submitted = True
        self.errors = []
        self._model_instance = None

        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            self.errors.append(INVALID_FORM_MESSAGE)
            raw = {}

        extra = [key for key in raw if key not in self.children]
        if extra:
            logger.debug("Form %s received extra fields: %s", self.full_name, extra)
            self.errors.append(EXTRA_FIELDS_MESSAGE)

        for name, child in self.children.items():
            child.submit(raw.get(name))

        if self.model is not None and not self.has_errors():
            self._validate_model()

    def _validate_model(self) -> None:
        assert self.model is not None
        payload = {name: child.data for name, child in self.children.items()}
        try:
            self._model_instance = self.model.model_validate(payload)
        except PydanticValidationError as exc:
            for err in exc.errors():
                self._target_for(err.get("loc", ())).add_error(err["msg"])

    def _target_for(self, loc: Sequence[Any]) -> Field:
        """Resolve a pydantic error location to the deepest matching field."""
        target: Field = self
        for part in loc:
            if not isinstance(target, Form) or str(part) not in target.children:
                break
            target = target.children[str(part)]
        return target

    def has_errors(self) -> bool:
        return bool(self.errors) or any(child.has_errors() for child in self.children.values())

    def clear_errors(self, recursive: bool = False) -> None:
        self.errors = []
        if recursive:
            for child in self.children.values():
                child.clear_errors(recursive=True)

    def get_errors(self, deep: bool = True) -> list[tuple[str, str]]:
        """Return ``(full_name, message)`` pairs, the form's own errors first."""
        found = [(self.full_name, message) for message in self.errors]
        if not deep:
            return found
        for child in self.children.values():
            if isinstance(child, Form):
                found.extend(child.get_errors(deep=True))
            else:
                found.extend((child.full_name, message) for message in child.errors)
        return found

    def create_view(self) -> FormView:
        view = super().create_view()
        view.value = {name: child.data for name, child in self.children.items()}
        view.children = [child.create_view() for child in self.children.values()]
        return view
