"""
Live component host.

A live component is revived on every request from the props it dehydrated
into the previous response. The host drives it through explicit lifecycle
methods:

1. ``mount(data)`` on first render, which calls ``on_mount``
2. ``revive(props, updates)`` on every later request
3. ``call_action(name, **args)`` for a user interaction, if any
4. ``render_context()``, which calls ``before_re_render`` and returns the
   template variables plus the props for the next round trip

Persisted props are declared explicitly in ``live_props``. Only writable
props can be changed by the client.
"""

from __future__ import annotations

import copy
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from liveform.errors import ComponentError
from liveform.forms.protocols import FormInstance
from liveform.forms.view import FormView
from liveform.runtime.behavior import ModelBehavior
from liveform.runtime.form_hydration import FormHydrationController, ValidationMode, ValueTree
from liveform.runtime.model_paths import parse_model_path, set_by_path

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="LiveComponent")
F = TypeVar("F", bound=Callable[..., Any])

_MISSING = object()

# Host machinery that mount data must never replace
_RESERVED_ATTRIBUTES = frozenset({"live_props", "form_controller"})


class LiveProp(BaseModel):
    """
    A component attribute persisted across round trips.

    Example:
        LiveProp(name="query", writable=True)
        LiveProp(name="form_values", writable=True, field_name=lambda c: c.get_form_name())
    """

    model_config = ConfigDict(frozen=True)

    name: str
    writable: bool = False
    field_name: str | Callable[[Any], str] | None = None

    def resolve_field_name(self, component: Any) -> str:
        """Key under which the prop is dehydrated."""
        if self.field_name is None:
            return self.name
        if callable(self.field_name):
            return self.field_name(component)
        return self.field_name


def live_action(fn: F) -> F:
    """Mark a component method as callable from the client."""
    fn._live_action = True  # type: ignore[attr-defined]
    return fn


class LiveComponent:
    """Base class for server-rendered live components."""

    live_props: ClassVar[tuple[LiveProp, ...]] = ()

    # -------------------------------------------------------------------------
    # Lifecycle hooks
    # -------------------------------------------------------------------------

    def on_mount(self, data: dict[str, Any]) -> dict[str, Any]:
        """Consume mount data; return whatever should be assigned to attributes."""
        return data

    def before_re_render(self) -> None:
        """Called before every render that follows a revive."""

    def expose(self) -> dict[str, Any]:
        """Template variables for the next render."""
        return {}

    # -------------------------------------------------------------------------
    # Host entry points
    # -------------------------------------------------------------------------

    @classmethod
    def mount(cls: type[C], data: dict[str, Any] | None = None) -> C:
        component = cls()
        residual = component.on_mount(dict(data or {}))
        for key, value in residual.items():
            if not cls._is_mountable(key):
                raise ComponentError(
                    "Unknown mount data",
                    {"component": cls.__name__, "key": key},
                )
            component._set_prop(key, value)
        return component

    @classmethod
    def _is_mountable(cls, key: str) -> bool:
        """Live props and public, non-callable class attributes accept mount data."""
        if any(prop.name == key for prop in cls.live_props):
            return True
        if key.startswith("_") or key in _RESERVED_ATTRIBUTES:
            return False
        attribute = inspect.getattr_static(cls, key, _MISSING)
        if attribute is _MISSING or isinstance(attribute, property):
            return False
        return not callable(attribute) and not isinstance(attribute, (staticmethod, classmethod))

    @classmethod
    def revive(
        cls: type[C],
        props: dict[str, Any],
        updates: dict[str, Any] | None = None,
    ) -> C:
        """Rebuild a component from dehydrated props and apply client updates."""
        component = cls()
        # Props are restored in declaration order, so a field name may depend
        # on an earlier prop.
        for prop in cls.live_props:
            key = prop.resolve_field_name(component)
            if key in props:
                component._set_prop(prop.name, copy.deepcopy(props[key]))
        for path, value in (updates or {}).items():
            component.apply_update(path, value)
        return component

    def dehydrate(self) -> dict[str, Any]:
        return {prop.resolve_field_name(self): getattr(self, prop.name) for prop in self.live_props}

    def apply_update(self, path: str, value: Any) -> None:
        """Set a writable prop, or a nested value inside one, from a model path."""
        segments = parse_model_path(path)
        prop = self._prop_for_field(segments[0])
        if prop is None or not prop.writable:
            logger.warning(
                "Blocked update of non-writable prop %s on %s", path, type(self).__name__
            )
            raise ComponentError(
                "Prop is not writable",
                {"component": type(self).__name__, "path": path},
            )

        if len(segments) == 1:
            self._set_prop(prop.name, value, path=path)
            return

        current = getattr(self, prop.name)
        current = copy.deepcopy(current) if isinstance(current, dict) else {}
        set_by_path(current, segments[1:], value)
        self._set_prop(prop.name, current, path=path)
        logger.debug("Set %s.%s = %r", type(self).__name__, path, value)

    def _set_prop(self, name: str, value: Any, path: str | None = None) -> None:
        """Assign an attribute, turning rejected values into a ComponentError."""
        try:
            setattr(self, name, value)
        except ValidationError as exc:
            logger.warning("Rejected value for %s on %s", path or name, type(self).__name__)
            raise ComponentError(
                "Invalid prop value",
                {
                    "component": type(self).__name__,
                    "path": path or name,
                    "errors": "; ".join(err["msg"] for err in exc.errors()),
                },
            ) from exc

    def call_action(self, name: str, **args: Any) -> Any:
        method = getattr(self, name, None)
        if name.startswith("_") or method is None or not getattr(method, "_live_action", False):
            raise ComponentError(
                "Not a live action",
                {"component": type(self).__name__, "action": name},
            )
        logger.debug("Calling action %s.%s", type(self).__name__, name)
        return method(**args)

    def render_context(self, re_render: bool = True) -> dict[str, Any]:
        """Template variables plus ``props``. The first render after ``mount`` passes ``re_render=False``."""
        if re_render:
            self.before_re_render()
        context = self.expose()
        context["props"] = self.dehydrate()
        return context

    def _prop_for_field(self, field_name: str) -> LiveProp | None:
        for prop in self.live_props:
            if prop.resolve_field_name(self) == field_name:
                return prop
        return None


def _form_values_field_name(component: FormComponent) -> str:
    return component.form_controller.state.form_name or component.get_form_instance().name


class FormComponent(LiveComponent, ABC):
    """
    A live component backed by a form.

    Subclasses build the form in ``instantiate_form`` and may tune client
    triggers in ``configure_model_behavior``. Actions call ``submit_form``
    to validate strictly.

    Example:
        class ProfileForm(FormComponent):
            def instantiate_form(self):
                return Form("profile", [Field("name", required=True)])

            def configure_model_behavior(self, behavior):
                behavior.field("profile[name]", "on(input)")

            @live_action
            def save(self):
                self.submit_form()
    """

    live_props: ClassVar[tuple[LiveProp, ...]] = (
        LiveProp(name="form_name"),
        LiveProp(name="form_values", writable=True, field_name=_form_values_field_name),
        LiveProp(name="was_submitted", writable=True),
        LiveProp(name="validation_mode", writable=True),
    )

    def __init__(self) -> None:
        self.form_controller = FormHydrationController(
            self.instantiate_form, self.configure_model_behavior
        )

    @abstractmethod
    def instantiate_form(self) -> FormInstance:
        """Return the full, top-level form this component uses."""

    def configure_model_behavior(self, behavior: ModelBehavior) -> None:
        """Customize client triggers; the default re-renders on change."""

    # -------------------------------------------------------------------------
    # Persisted state
    # -------------------------------------------------------------------------

    @property
    def form_name(self) -> str | None:
        return self.form_controller.state.form_name

    @form_name.setter
    def form_name(self, value: str | None) -> None:
        self.form_controller.state.form_name = value

    @property
    def form_values(self) -> ValueTree | None:
        return self.form_controller.state.form_values

    @form_values.setter
    def form_values(self, value: ValueTree | None) -> None:
        self.form_controller.state.form_values = value

    @property
    def was_submitted(self) -> bool:
        return self.form_controller.state.was_submitted

    @was_submitted.setter
    def was_submitted(self, value: bool) -> None:
        self.form_controller.state.was_submitted = value

    @property
    def validation_mode(self) -> ValidationMode:
        return self.form_controller.state.validation_mode

    @validation_mode.setter
    def validation_mode(self, value: ValidationMode | str) -> None:
        self.form_controller.state.validation_mode = value  # type: ignore[assignment]

    # -------------------------------------------------------------------------
    # Form access
    # -------------------------------------------------------------------------

    @property
    def form(self) -> FormView:
        return self.form_controller.get_form()

    def get_form_name(self) -> str:
        return self.form_controller.get_form_name()

    def get_form_instance(self) -> FormInstance:
        return self.form_controller.get_form_instance()

    def submit_form(self) -> None:
        self.form_controller.submit_form()

    def dehydrate(self) -> dict[str, Any]:
        self.get_form_name()
        return super().dehydrate()

    def on_mount(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.form_controller.initialize_on_mount(data)

    def before_re_render(self) -> None:
        self.form_controller.hydrate_on_re_render()

    def expose(self) -> dict[str, Any]:
        return {"form": self.form}
