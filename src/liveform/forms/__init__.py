"""
Form engine for live components.

- ``protocols``: the contract the hydration controller consumes
- ``view``: the ``FormView`` tree handed to templates
- ``fields``: a pydantic-backed reference implementation of the contract
"""

from liveform.forms.fields import CheckboxField, ChoiceField, Field, Form
from liveform.forms.protocols import ClearableErrors, FormInstance
from liveform.forms.view import FormView

__all__ = [
    "CheckboxField",
    "ChoiceField",
    "ClearableErrors",
    "Field",
    "Form",
    "FormInstance",
    "FormView",
]
