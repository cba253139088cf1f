"""Tests for the FormField adapter."""

import pytest

from formengine.controller import FormController
from formengine.field import FormField
from formengine.types import FieldStatus, Rule, ValidationFailed


@pytest.fixture
def form():
    return FormController(model={"username": "", "email": ""})


class TestMounting:
    def test_mount_registers(self, form):
        field = FormField(form, "username", rules=Rule(min=3))
        assert not field.mounted

        field.mount()

        assert field.mounted
        assert form.fields == ["username"]
        assert field.record is form.get_field("username")

    def test_unmount_unregisters(self, form):
        field = FormField(form, "username")
        field.mount()
        field.unmount()
        assert form.fields == []
        assert field.record is None
        assert field.status is FieldStatus.NONE

    def test_unmount_after_controller_teardown_is_safe(self, form):
        field = FormField(form, "username")
        field.mount()
        form.unregister_field("username")
        field.unmount()

    def test_segment_name(self, form):
        field = FormField(form, ["user", "name"])
        assert field.path == "user.name"

    def test_required_prop(self, form):
        field = FormField(form, "username", required=True)
        assert field.is_required
        field.mount()
        assert field.record.rules[0].required

    def test_required_from_form_rules(self):
        form = FormController(rules={"username": {"required": True}})
        field = FormField(form, "username")
        assert field.is_required

    def test_set_rules_reregisters(self, form):
        field = FormField(form, "username", rules=Rule(min=3))
        field.mount()
        field.set_rules(Rule(max=5), required=True)
        rules = field.record.rules
        assert rules[0].required
        assert rules[1].max == 5


class TestInteraction:
    @pytest.mark.asyncio
    async def test_change_writes_value_and_validates(self, form):
        field = FormField(
            form, "username", rules=Rule(min=3, message="Too short", trigger="change")
        )
        field.mount()

        await field.handle_change("ab")

        assert form.get_field_value("username") == "ab"
        assert field.value == "ab"
        assert field.status is FieldStatus.ERROR
        assert field.error_message == "Too short"

        await field.handle_change("abc")
        assert field.status is FieldStatus.SUCCESS
        assert field.error_message is None

    @pytest.mark.asyncio
    async def test_blur_runs_blur_rules_only(self, form):
        field = FormField(
            form,
            "email",
            rules=[
                Rule(type="email", message="Invalid email", trigger="blur"),
                Rule(required=True, message="Required", trigger="change"),
            ],
        )
        field.mount()
        form.set_field_value("email", "nope")

        await field.handle_blur()

        assert field.error_message == "Invalid email"

    @pytest.mark.asyncio
    async def test_disabled_field_ignores_interaction(self, form):
        field = FormField(form, "username", rules=Rule(required=True, trigger="blur"), disabled=True)
        field.mount()

        await field.handle_blur()

        assert field.is_disabled
        assert field.status is FieldStatus.NONE

    @pytest.mark.asyncio
    async def test_disabled_form_is_inherited(self, form):
        field = FormField(form, "username", rules=Rule(required=True, trigger="blur"))
        field.mount()
        form.disabled = True

        await field.handle_blur()

        assert field.is_disabled
        assert field.status is FieldStatus.NONE

    @pytest.mark.asyncio
    async def test_validate_raises(self, form):
        field = FormField(form, "username", required=True)
        field.mount()
        with pytest.raises(ValidationFailed):
            await field.validate()
        assert field.error_message == "username is required"

    @pytest.mark.asyncio
    async def test_warnings_exposed(self, form):
        field = FormField(
            form, "username", rules=Rule(min=8, message="Short usernames are easy to guess", warning_only=True)
        )
        field.mount()
        form.set_field_value("username", "ada")

        await field.validate()

        assert field.status is FieldStatus.WARNING
        assert field.warning_messages == ["Short usernames are easy to guess"]


class TestResetAndClear:
    @pytest.mark.asyncio
    async def test_reset_field(self):
        form = FormController(model={"username": "initial", "email": "e"})
        username = FormField(form, "username", required=True)
        email = FormField(form, "email")
        username.mount()
        email.mount()
        form.set_fields_value({"username": "", "email": "changed"})
        with pytest.raises(ValidationFailed):
            await username.validate()

        username.reset_field()

        assert username.value == "initial"
        assert username.status is FieldStatus.NONE
        assert email.value == "changed"

    @pytest.mark.asyncio
    async def test_clear_validate(self, form):
        field = FormField(form, "username", required=True)
        field.mount()
        with pytest.raises(ValidationFailed):
            await field.validate()

        field.clear_validate()

        assert field.status is FieldStatus.NONE
        assert field.error_message is None


class TestManualStatus:
    @pytest.mark.parametrize("status", ["error", "warning", "success", "validating"])
    def test_override_wins(self, form, status):
        field = FormField(form, "username", validate_status=status)
        field.mount()
        assert field.status is FieldStatus(status)
