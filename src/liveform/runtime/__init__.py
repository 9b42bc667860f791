"""
Live form runtime.

This module provides:
- ModelBehavior for client binding triggers
- FormHydrationController, the form state machine held by a component
- LiveComponent / FormComponent, the explicit lifecycle host
- FastAPI exception handlers translating validation failures into 422s

Example usage:
    >>> from liveform.forms import Field, Form
    >>> from liveform.runtime import FormComponent, live_action
    >>>
    >>> class Signup(FormComponent):
    ...     def instantiate_form(self):
    ...         return Form("signup", [Field("email", required=True)])
    ...
    ...     @live_action
    ...     def save(self):
    ...         self.submit_form()
    >>>
    >>> component = Signup.mount()
    >>> props = component.render_context(re_render=False)["props"]
"""

from liveform.runtime.behavior import ModelBehavior
from liveform.runtime.component import FormComponent, LiveComponent, LiveProp, live_action
from liveform.runtime.form_hydration import (
    FormHydrationController,
    FormHydrationState,
    ValidationMode,
    decorate_view,
    extract_values,
    suppress_unvalidated_errors,
)

__all__ = [
    "FormComponent",
    "FormHydrationController",
    "FormHydrationState",
    "LiveComponent",
    "LiveProp",
    "ModelBehavior",
    "ValidationMode",
    "decorate_view",
    "extract_values",
    "live_action",
    "suppress_unvalidated_errors",
]
