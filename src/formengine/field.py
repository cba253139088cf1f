"""FormField: the adapter a UI field element drives.

A field receives its FormController explicitly, registers on mount,
unregisters on unmount, and forwards blur/change interactions.

Usage:
    username = FormField(form, "username", rules=[Rule(min=3, trigger="blur")],
                         required=True)
    username.mount()
    await username.handle_change("ab")
    await username.handle_blur()
    username.status          # FieldStatus.ERROR
    username.error_message   # "username must be at least 3 characters"
"""

from typing import Any

from formengine import paths
from formengine.controller import FormController
from formengine.types import (
    FieldPath,
    FieldRecord,
    FieldStatus,
    RuleSpec,
    Trigger,
)


class FormField:
    """One field of a form (FormItem).

    Attributes:
        form: The owning controller
        path: Canonical field path
        label: Display label
        rules: Field-level rules (form-level rules apply when None)
        required: Prepend a required rule
        disabled: Field-level disabled flag
        validate_status: Manual status override; when set, `status` returns it
    """

    def __init__(
        self,
        form: FormController,
        name: FieldPath,
        *,
        label: str | None = None,
        rules: RuleSpec = None,
        required: bool = False,
        disabled: bool = False,
        validate_status: FieldStatus | str | None = None,
    ):
        self.form = form
        self.path = paths.join_path(name)
        self.label = label
        self.rules = rules
        self.required = required
        self.disabled = disabled
        self.validate_status = (
            FieldStatus(validate_status) if validate_status is not None else None
        )
        self._mounted = False

    @property
    def record(self) -> FieldRecord | None:
        return self.form.get_field(self.path)

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> FieldRecord:
        record = self.form.register_field(
            self.path, self.rules, required=self.required, disabled=self.disabled
        )
        self._mounted = True
        return record

    def unmount(self) -> None:
        self.form.unregister_field(self.path)
        self._mounted = False

    def set_rules(self, rules: RuleSpec, required: bool | None = None) -> None:
        """Replace rules after a prop change; re-registers when mounted."""
        self.rules = rules
        if required is not None:
            self.required = required
        if self._mounted:
            self.form.update_rules(self.path, self.rules, required=self.required)

    # -------------------------------------------------------------------------
    # State read by the UI
    # -------------------------------------------------------------------------

    @property
    def status(self) -> FieldStatus:
        if self.validate_status is not None:
            return self.validate_status
        record = self.record
        return record.status if record is not None else FieldStatus.NONE

    @property
    def error_message(self) -> str | None:
        record = self.record
        if record is None or not record.errors:
            return None
        return record.errors[0]

    @property
    def warning_messages(self) -> list[str]:
        record = self.record
        return list(record.warnings) if record is not None else []

    @property
    def is_required(self) -> bool:
        record = self.record
        if record is not None:
            return record.is_required
        return self.required or any(
            rule.required for rule in self.form.get_field_rules(self.path, self.rules)
        )

    @property
    def is_disabled(self) -> bool:
        return self.disabled or self.form.disabled

    @property
    def value(self) -> Any:
        return self.form.get_field_value(self.path)

    # -------------------------------------------------------------------------
    # Interaction
    # -------------------------------------------------------------------------

    async def handle_blur(self) -> None:
        await self.form.trigger_validate(self.path, Trigger.BLUR)

    async def handle_change(self, value: Any) -> None:
        """Write the new value, then run change-triggered rules."""
        self.form.set_field_value(self.path, value)
        await self.form.trigger_validate(self.path, Trigger.CHANGE)

    async def validate(self) -> None:
        """Programmatic validation of this field; raises ValidationFailed."""
        await self.form.validate_field(self.path)

    def reset_field(self) -> None:
        self.form.reset_fields([self.path])

    def clear_validate(self) -> None:
        self.form.clear_validate([self.path])
