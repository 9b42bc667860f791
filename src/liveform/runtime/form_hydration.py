"""
Form hydration for live components.

Keeps a form instance, its view and the client-facing value tree consistent
across render cycles:

- on mount, the value tree is extracted from the (possibly supplied) view
- before every re-render, the value tree is re-submitted and re-validated
- an explicit submit action always validates strictly

Validation modes:

- ``early``: every re-render enforces validity
- ``late``: errors are suppressed until an action has explicitly submitted
  the form, so a half-filled form renders cleanly
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from liveform.config import get_config
from liveform.errors import UnprocessableInput
from liveform.forms.protocols import ClearableErrors, FormInstance
from liveform.forms.view import FormView
from liveform.runtime.behavior import ModelBehavior

logger = logging.getLogger(__name__)

ValueTree = dict[str, Any]


class ValidationMode(StrEnum):
    """When validation errors make a re-render fail."""

    EARLY = "early"  # Every re-render
    LATE = "late"  # Only after an explicit submit


def _default_validation_mode() -> ValidationMode:
    return ValidationMode(get_config().validation_mode)


class FormHydrationState(BaseModel):
    """Form state that survives a client round trip."""

    model_config = ConfigDict(validate_assignment=True)

    form_name: str | None = Field(default=None, description="Top-level form name")
    form_values: ValueTree | None = Field(default=None, description="Raw form values")
    was_submitted: bool = Field(
        default=False,
        description="Set once an action has explicitly submitted the form",
    )
    validation_mode: ValidationMode = Field(default_factory=_default_validation_mode)


# =============================================================================
# View Tree Passes
# =============================================================================


def decorate_view(view: FormView, behavior: ModelBehavior, was_submitted: bool) -> FormView:
    """
    Return a copy of ``view`` with client binding hints on every field.

    Each descendant gets ``data-model`` (its trigger directive) and
    ``data-successful`` (``"true"`` once submitted without errors). The root
    node is left untouched. Attributes are assigned, so decorating twice with
    the same behavior yields the same attribute maps.
    """
    decorated = view.copy()
    for node in decorated.walk():
        node.attr["data-model"] = behavior.trigger_for(node.full_name)
        node.attr["data-successful"] = "true" if was_submitted and not node.errors else "false"
    return decorated


def extract_values(view: FormView) -> ValueTree:
    """
    Return a hierarchical dict of the view's values.

    The result equals the raw data a browser would post for the form, so it
    can be submitted back into the form unchanged.
    """
    values: ValueTree = {}
    for child in view.children:
        # Expanded choices already carry their value in submission shape,
        # e.g. ["text"] when "text" is ticked and "phone" is not.
        if not child.expanded and child.children:
            values[child.name] = extract_values(child)
        elif child.checked is not None:
            values[child.name] = child.value if child.checked else None
        else:
            values[child.name] = child.value
    return values


def suppress_unvalidated_errors(form: FormInstance) -> None:
    """Clear validation errors on every clearable node of the form tree."""
    if isinstance(form, ClearableErrors):
        form.clear_errors(recursive=True)
    for child in form:
        suppress_unvalidated_errors(child)


def collect_errors(view: FormView) -> list[str]:
    """Flatten view errors to ``"<full name>: <message>"`` strings."""
    messages: list[str] = []
    for node in (view, *view.walk()):
        messages.extend(f"{node.full_name}: {message}" for message in node.errors)
    return messages


# =============================================================================
# Controller
# =============================================================================


class FormHydrationController:
    """
    Form capability held by a live component.

    Args:
        instantiate_form: Factory for the top-level form instance. Called at
            most once per controller.
        configure_model_behavior: Hook that customizes the ``ModelBehavior``
            built for each decoration pass.
        state: Persisted state revived from the client, if any.
    """

    def __init__(
        self,
        instantiate_form: Callable[[], FormInstance],
        configure_model_behavior: Callable[[ModelBehavior], None] | None = None,
        state: FormHydrationState | None = None,
    ):
        self._instantiate_form = instantiate_form
        self._configure_model_behavior = configure_model_behavior
        self.state = state if state is not None else FormHydrationState()
        self._form_view: FormView | None = None
        self._form_instance: FormInstance | None = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize_on_mount(self, data: dict[str, Any]) -> dict[str, Any]:
        """Take an optional pre-built view from ``data["form"]`` and seed the value tree."""
        data = dict(data)
        if "form" in data:
            self._form_view = self._decorate(data.pop("form"))

        self.state.form_values = extract_values(self.get_form())
        return data

    def hydrate_on_re_render(self) -> None:
        self.hydrate_form()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def get_form(self) -> FormView:
        if self._form_view is None:
            self._form_view = self._decorate(self.get_form_instance().create_view())
        return self._form_view

    def get_form_name(self) -> str:
        if not self.state.form_name:
            self.state.form_name = self.get_form().name
        return self.state.form_name

    def get_form_instance(self) -> FormInstance:
        if self._form_instance is None:
            self._form_instance = self._instantiate_form()
        return self._form_instance

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def hydrate_form(self) -> FormInstance:
        """
        Submit the value tree into the form and apply the validation mode.

        Raises:
            UnprocessableInput: If the form is invalid and the mode requires
                strictness at this point.
        """
        form = self.get_form_instance()
        if form.is_submitted():
            return form

        form.submit(self.state.form_values)

        is_valid = form.is_valid()
        unprocessable = False
        if self.state.validation_mode is ValidationMode.EARLY and not is_valid:
            unprocessable = True

        if self.state.validation_mode is ValidationMode.LATE and not is_valid:
            if self.state.was_submitted:
                unprocessable = True
            else:
                logger.debug("Suppressing errors on unsubmitted form %s", form.name)
                suppress_unvalidated_errors(form)

        # Submitted data may have changed the values or structure of the form
        view = self.get_form()
        self.state.form_values = extract_values(view)

        logger.debug(
            "Hydrated form %s (mode=%s, valid=%s, was_submitted=%s)",
            form.name,
            self.state.validation_mode,
            is_valid,
            self.state.was_submitted,
        )
        if unprocessable:
            raise UnprocessableInput(errors=collect_errors(view))

        return form

    def submit_form(self) -> None:
        """Mark the form as explicitly submitted and validate it strictly."""
        self.state.was_submitted = True
        form = self.hydrate_form()

        if not form.is_valid():
            raise UnprocessableInput(errors=collect_errors(self.get_form()))

    def _decorate(self, view: FormView) -> FormView:
        behavior = ModelBehavior()
        if self._configure_model_behavior is not None:
            self._configure_model_behavior(behavior)
        return decorate_view(view, behavior, self.state.was_submitted)
