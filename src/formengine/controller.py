"""FormController: the public façade of the engine.

Owns the model reference, the FieldRegistry and the ValidationOrchestrator,
exposes the form operations, and emits lifecycle events.

Usage:
    form = FormController(
        model={"username": "ab"},
        rules={"username": [
            {"required": True, "message": "Username is required"},
            {"min": 3, "message": "Username must be at least 3 characters"},
        ]},
    )
    form.register_field("username")

    try:
        await form.validate()
    except ValidationFailed as e:
        render(e.errors)
"""

import logging
from typing import Any

from formengine import paths
from formengine.config import FormOptions
from formengine.events import EventEmitter, FormEvent, Listener
from formengine.orchestrator import ValidationOrchestrator
from formengine.registry import FieldRegistry
from formengine.types import (
    FieldOutcome,
    FieldPath,
    FieldRecord,
    Rule,
    RuleSpec,
    Trigger,
    ValidationFailed,
    normalize_rules,
)

logger = logging.getLogger(__name__)


class FormController:
    """A form: model, registered fields, validation and events.

    Args:
        model: Caller-owned nested dict; mutated in place by set/reset
        rules: Form-level rules by field path, used by fields registered
            without rules of their own
        options: FormOptions (disabled, scroll_to_error, ...)
    """

    def __init__(
        self,
        model: dict[str, Any] | None = None,
        rules: dict[str, RuleSpec] | None = None,
        options: FormOptions | None = None,
    ):
        self.model: dict[str, Any] = model if model is not None else {}
        self.rules: dict[str, list[Rule]] = {
            paths.join_path(path): normalize_rules(spec)
            for path, spec in (rules or {}).items()
        }
        self.options = options or FormOptions()
        self.registry = FieldRegistry(self.model)
        self.orchestrator = ValidationOrchestrator(self.registry)
        self.events = EventEmitter()

    @property
    def disabled(self) -> bool:
        return self.options.disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self.options.disabled = value

    def on(self, event: FormEvent | str, listener: Listener) -> Listener:
        return self.events.on(event, listener)

    def off(self, event: FormEvent | str, listener: Listener) -> None:
        self.events.off(event, listener)

    # =========================================================================
    # Field registration
    # =========================================================================

    def get_field_rules(
        self,
        field: FieldPath,
        rules: RuleSpec = None,
        required: bool = False,
    ) -> list[Rule]:
        """Resolve the effective rule list for a field.

        The field's own rules win over form-level rules for the same path.
        `required` prepends a required rule unless one is already present.
        """
        resolved = normalize_rules(rules)
        if not resolved:
            resolved = list(self.rules.get(paths.join_path(field), []))
        if required and not any(rule.required for rule in resolved):
            resolved.insert(0, Rule(required=True))
        return resolved

    def register_field(
        self,
        field: FieldPath,
        rules: RuleSpec = None,
        *,
        required: bool = False,
        disabled: bool = False,
    ) -> FieldRecord:
        """Register a field on mount. Re-registering replaces its rules."""
        resolved = self.get_field_rules(field, rules, required)
        return self.registry.register(field, resolved, disabled=disabled)

    def unregister_field(self, field: FieldPath) -> None:
        """Unregister a field on unmount. Unknown fields are ignored."""
        self.registry.unregister(field)

    def update_rules(
        self,
        field: FieldPath,
        rules: RuleSpec = None,
        *,
        required: bool = False,
    ) -> FieldRecord | None:
        """Replace the rules of a registered field (e.g. after a prop change).

        Returns:
            The updated record, or None if the field isn't registered
        """
        record = self.registry.get(field)
        if record is None:
            return None
        record = self.register_field(
            field, rules, required=required, disabled=record.disabled
        )
        if self.options.clear_on_rule_change:
            self.orchestrator.cancel([field])
        return record

    def get_field(self, field: FieldPath) -> FieldRecord | None:
        return self.registry.get(field)

    @property
    def fields(self) -> list[str]:
        """Registered field paths in registration order."""
        return self.registry.paths()

    # =========================================================================
    # Validation
    # =========================================================================

    async def validate(self, fields: list[FieldPath] | None = None) -> None:
        """Validate the given fields (default: all registered fields).

        Every rule runs, regardless of its trigger.

        Raises:
            ValidationFailed: With errors ordered by field registration order
        """
        errors = await self.orchestrator.validate_all(fields)
        if errors:
            logger.debug("Form validation failed with %d error(s)", len(errors))
            self.events.emit(FormEvent.VALIDATE_ERROR, errors)
            if self.options.scroll_to_error:
                self.events.emit(FormEvent.SCROLL_TO_FIELD, errors[0].field)
            raise ValidationFailed(errors)

        self.events.emit(FormEvent.VALIDATE_SUCCESS, self.get_fields_value())

    async def validate_field(self, field: FieldPath) -> None:
        """Validate a single field. Unknown fields resolve successfully.

        A run superseded by a newer one, or cancelled while in flight,
        resolves without raising.

        Raises:
            ValidationFailed: Holding the field's error
        """
        outcome = await self.orchestrator.validate_field(field)
        if outcome.applied and outcome.errors:
            raise ValidationFailed(outcome.to_errors())

    async def trigger_validate(
        self,
        field: FieldPath,
        trigger: Trigger | str,
    ) -> FieldOutcome | None:
        """Validate in response to a user interaction (blur/change).

        Only rules whose trigger includes `trigger` run. Nothing runs when
        the form or the field is disabled. Failures are reflected in the
        field's record; nothing is raised.

        Returns:
            The outcome, or None if the field is unknown or disabled
        """
        trigger = Trigger(trigger)
        record = self.registry.get(field)
        if record is None:
            return None
        if self.disabled or record.disabled:
            logger.debug("Skipping %s validation of disabled field '%s'", trigger.value, record.path)
            return None
        return await self.orchestrator.validate_field(field, trigger)

    async def submit(self) -> dict[str, Any]:
        """Validate every field and emit submit with the values on success.

        Raises:
            ValidationFailed: If any field fails (submit is not emitted)
        """
        await self.validate()
        values = self.get_fields_value()
        self.events.emit(FormEvent.SUBMIT, values)
        return values

    def clear_validate(self, fields: list[FieldPath] | None = None) -> None:
        """Clear validation state without touching values."""
        self.orchestrator.cancel(fields)

    def reset_fields(self, fields: list[FieldPath] | None = None) -> None:
        """Restore initial values and clear validation state.

        Only the given fields (default: all registered fields) are touched.
        """
        records = self.orchestrator.select(fields)
        changed: dict[str, Any] = {}
        for record in records:
            if not self.registry.has_snapshot(record.path):
                continue
            value = self.registry.initial_value(record.path)
            self.registry.set_value(record.path, value)
            changed[record.path] = value
        self.orchestrator.cancel([record.path for record in records])

        if changed:
            self.events.emit(FormEvent.VALUES_CHANGE, changed, self.get_fields_value())

    # =========================================================================
    # Model access
    # =========================================================================

    def get_field_value(self, field: FieldPath) -> Any:
        return self.registry.get_value(field)

    def set_field_value(self, field: FieldPath, value: Any) -> None:
        """Write one value and emit valuesChange once."""
        self.registry.set_value(field, value)
        self.events.emit(
            FormEvent.VALUES_CHANGE,
            {paths.join_path(field): value},
            self.get_fields_value(),
        )

    def get_fields_value(self) -> dict[str, Any]:
        """A shallow copy of the model."""
        return dict(self.model)

    def set_fields_value(self, values: dict[str, Any]) -> None:
        """Write several values (keys are field paths) and emit valuesChange once."""
        changed: dict[str, Any] = {}
        for field, value in values.items():
            self.registry.set_value(field, value)
            changed[paths.join_path(field)] = value
        self.events.emit(FormEvent.VALUES_CHANGE, changed, self.get_fields_value())
