"""Shared pytest fixtures for liveform tests."""

from __future__ import annotations

import pytest

from liveform.config import reset_config
from liveform.forms import CheckboxField, ChoiceField, Field, Form

LIVEFORM_ENV_VARS = (
    "LIVEFORM_VALIDATION_MODE",
    "LIVEFORM_DEFAULT_TRIGGER",
    "LIVEFORM_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default configuration."""
    for key in LIVEFORM_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


def build_registration_form(data: dict | None = None) -> Form:
    """Return a fresh registration form covering every field kind."""
    return Form(
        "registration",
        [
            Field("email", required=True),
            Field("age", int),
            CheckboxField("newsletter"),
            ChoiceField(
                "contact",
                {"text": "Text message", "phone": "Phone call"},
                expanded=True,
                multiple=True,
            ),
            Form("address", [Field("city", required=True), Field("zip")]),
        ],
        data=data,
    )


@pytest.fixture
def registration_form() -> Form:
    return build_registration_form()


@pytest.fixture
def valid_values() -> dict:
    """Raw values that pass validation for the registration form."""
    return {
        "email": "ada@example.com",
        "age": "36",
        "newsletter": "1",
        "contact": ["text"],
        "address": {"city": "London", "zip": "N1"},
    }


@pytest.fixture
def invalid_values() -> dict:
    """Raw values missing the required email and city."""
    return {
        "email": "",
        "age": " 42 ",
        "newsletter": None,
        "contact": [],
        "address": {"city": "", "zip": ""},
    }


@pytest.fixture
def form_factory():
    """The registration form builder, for controllers that instantiate lazily."""
    return build_registration_form
