"""Unit tests for the live component host and FormComponent."""

from __future__ import annotations

from typing import Any

import pytest

from liveform.errors import ComponentError, UnprocessableInput
from liveform.forms import Field, Form
from liveform.runtime.behavior import ModelBehavior
from liveform.runtime.component import FormComponent, LiveComponent, LiveProp, live_action
from liveform.runtime.form_hydration import ValidationMode
from liveform.runtime.model_paths import parse_model_path, set_by_path


class Signup(FormComponent):
    """A two-field signup form that re-renders on input for the email."""

    title = "Sign up"

    def instantiate_form(self) -> Form:
        return Form(
            "signup",
            [
                Field("email", required=True),
                Form("address", [Field("city", required=True)]),
            ],
        )

    def configure_model_behavior(self, behavior: ModelBehavior) -> None:
        behavior.field("signup[email]", "on(input)")

    @live_action
    def save(self) -> str:
        self.submit_form()
        return "saved"

    def helper(self) -> None:
        """Not exposed to the client."""


class Counter(LiveComponent):
    live_props = (LiveProp(name="count", writable=True), LiveProp(name="step"))

    def __init__(self) -> None:
        self.count = 0
        self.step = 1
        self.renders = 0

    def before_re_render(self) -> None:
        self.renders += 1

    def expose(self) -> dict[str, Any]:
        return {"double": self.count * 2}

    @live_action
    def increment(self, times: int = 1) -> None:
        self.count += self.step * times


# =============================================================================
# Generic host
# =============================================================================


class TestLiveComponent:
    def test_mount_assigns_residual_data(self) -> None:
        counter = Counter.mount({"count": 5})
        assert counter.count == 5

    def test_mount_rejects_unknown_keys(self) -> None:
        with pytest.raises(ComponentError) as exc_info:
            Counter.mount({"nope": 1})
        assert exc_info.value.context["key"] == "nope"

    def test_mount_rejects_private_keys(self) -> None:
        with pytest.raises(ComponentError):
            Counter.mount({"_secret": 1})

    def test_dehydrate_and_revive(self) -> None:
        counter = Counter.mount({"count": 3, "step": 2})
        props = counter.dehydrate()
        assert props == {"count": 3, "step": 2}

        revived = Counter.revive(props)
        assert (revived.count, revived.step) == (3, 2)

    def test_writable_update(self) -> None:
        revived = Counter.revive({"count": 1, "step": 1}, {"count": 9})
        assert revived.count == 9

    def test_non_writable_update_is_rejected(self) -> None:
        with pytest.raises(ComponentError):
            Counter.revive({"count": 1, "step": 1}, {"step": 100})

    def test_unknown_update_is_rejected(self) -> None:
        with pytest.raises(ComponentError):
            Counter.revive({"count": 1, "step": 1}, {"renders": 100})

    def test_action(self) -> None:
        counter = Counter.revive({"count": 1, "step": 2})
        counter.call_action("increment", times=3)
        assert counter.count == 7

    def test_non_action_is_rejected(self) -> None:
        counter = Counter()
        with pytest.raises(ComponentError):
            counter.call_action("before_re_render")
        with pytest.raises(ComponentError):
            counter.call_action("missing")

    def test_render_context(self) -> None:
        counter = Counter.revive({"count": 2, "step": 1})
        context = counter.render_context()

        assert context == {"double": 4, "props": {"count": 2, "step": 1}}
        assert counter.renders == 1

    def test_first_render_skips_re_render_hook(self) -> None:
        counter = Counter.mount()
        counter.render_context(re_render=False)
        assert counter.renders == 0

    def test_static_field_name(self) -> None:
        class Renamed(LiveComponent):
            live_props = (LiveProp(name="value", field_name="v", writable=True),)
            value = 0

        renamed = Renamed.revive({"v": 4}, {"v": 5})
        assert renamed.dehydrate() == {"v": 5}


# =============================================================================
# Form component
# =============================================================================


class TestFormComponentMount:
    def test_mount_seeds_props(self) -> None:
        component = Signup.mount()
        props = component.render_context(re_render=False)["props"]

        assert props == {
            "form_name": "signup",
            "signup": {"email": "", "address": {"city": ""}},
            "was_submitted": False,
            "validation_mode": "late",
        }

    def test_mount_with_validation_mode(self) -> None:
        component = Signup.mount({"validation_mode": "early"})
        assert component.validation_mode is ValidationMode.EARLY

    def test_mount_with_supplied_view(self) -> None:
        view = Form("signup", [Field("email", default="ada@example.com")]).create_view()
        component = Signup.mount({"form": view, "title": "Join"})

        assert component.title == "Join"
        assert component.form_values == {"email": "ada@example.com"}
        assert component.form["email"].attr["data-model"] == "on(input)|signup[email]"

    @pytest.mark.parametrize("key", ["save", "helper", "submit_form", "form_controller"])
    def test_mount_cannot_replace_methods_or_internals(self, key: str) -> None:
        with pytest.raises(ComponentError) as exc_info:
            Signup.mount({key: "replaced"})
        assert exc_info.value.context["key"] == key

    def test_actions_survive_rejected_mount(self) -> None:
        with pytest.raises(ComponentError):
            Signup.mount({"save": "replaced"})
        assert callable(Signup.mount().save)

    def test_mount_cannot_replace_prop_registry(self) -> None:
        with pytest.raises(ComponentError):
            Counter.mount({"live_props": ()})

    def test_exposes_form(self) -> None:
        context = Signup.mount().render_context(re_render=False)
        assert context["form"].name == "signup"


class TestFormComponentReRender:
    @pytest.fixture
    def props(self) -> dict[str, Any]:
        return Signup.mount().render_context(re_render=False)["props"]

    def test_late_mode_renders_invalid_form_cleanly(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props, {"signup.email": " ada@example.com "})
        context = component.render_context()

        assert context["props"]["signup"] == {"email": "ada@example.com", "address": {"city": ""}}
        assert not context["form"].has_errors(deep=True)

    def test_bracketed_update_path(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props, {"signup[address][city]": "Paris"})
        context = component.render_context()
        assert context["props"]["signup"]["address"] == {"city": "Paris"}

    def test_update_does_not_mutate_previous_props(self, props: dict[str, Any]) -> None:
        Signup.revive(props, {"signup.email": "x@example.com"})
        assert props["signup"]["email"] == ""

    def test_early_mode_rejects_invalid_form(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props, {"validation_mode": "early"})
        with pytest.raises(UnprocessableInput):
            component.render_context()

    def test_form_name_is_not_writable(self, props: dict[str, Any]) -> None:
        with pytest.raises(ComponentError):
            Signup.revive(props, {"form_name": "other"})

    def test_save_with_invalid_data(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props, {"signup.email": "ada@example.com"})
        with pytest.raises(UnprocessableInput) as exc_info:
            component.call_action("save")

        assert component.was_submitted is True
        assert exc_info.value.errors == ["signup[address][city]: This value should not be blank."]

    def test_save_with_valid_data(self, props: dict[str, Any]) -> None:
        component = Signup.revive(
            props,
            {"signup.email": "ada@example.com", "signup.address.city": "Paris"},
        )
        assert component.call_action("save") == "saved"

        context = component.render_context()
        assert context["props"]["was_submitted"] is True
        assert context["form"]["email"].attr["data-successful"] == "true"

    def test_after_submit_late_mode_is_strict(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props, {"was_submitted": True})
        with pytest.raises(UnprocessableInput):
            component.render_context()

    @pytest.mark.parametrize(
        ("path", "value"),
        [
            ("validation_mode", "bogus"),
            ("validation_mode.nested", "early"),
            ("was_submitted", "maybe"),
            ("signup", "not a mapping"),
        ],
    )
    def test_invalid_update_value_is_rejected(
        self, props: dict[str, Any], path: str, value: Any
    ) -> None:
        with pytest.raises(ComponentError) as exc_info:
            Signup.revive(props, {path: value})
        assert exc_info.value.context["path"] == path

    def test_invalid_dehydrated_prop_is_rejected(self, props: dict[str, Any]) -> None:
        with pytest.raises(ComponentError) as exc_info:
            Signup.revive({**props, "validation_mode": "sometimes"})
        assert exc_info.value.context["path"] == "validation_mode"

    def test_helpers_are_not_actions(self, props: dict[str, Any]) -> None:
        component = Signup.revive(props)
        with pytest.raises(ComponentError):
            component.call_action("helper")
        with pytest.raises(ComponentError):
            component.call_action("submit_form")


# =============================================================================
# Model paths
# =============================================================================


class TestModelPaths:
    @pytest.mark.parametrize(
        ("path", "segments"),
        [
            ("a", ["a"]),
            ("a.b.c", ["a", "b", "c"]),
            ("a[b][c]", ["a", "b", "c"]),
            ("a.b[c]", ["a", "b", "c"]),
            ("a[b][]", ["a", "b"]),
        ],
    )
    def test_parse(self, path: str, segments: list[str]) -> None:
        assert parse_model_path(path) == segments

    def test_parse_empty(self) -> None:
        with pytest.raises(ValueError):
            parse_model_path("[]")

    def test_set_creates_intermediate_dicts(self) -> None:
        target: dict[str, Any] = {"a": "scalar"}
        set_by_path(target, ["a", "b", "c"], 1)
        assert target == {"a": {"b": {"c": 1}}}
