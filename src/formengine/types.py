"""Core types for the formengine validation system.

This module defines the foundational types shared by every layer:
- Rule: declarative constraint attached to a field
- FieldRecord: engine-owned validation state for one registered field
- ValidationError / ValidationFailed: the structured failure surface
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Union


class Trigger(Enum):
    """User interaction that re-runs a subset of a field's rules."""

    BLUR = "blur"
    CHANGE = "change"


class FieldStatus(Enum):
    """Validation state of a single field, as rendered by the UI layer."""

    NONE = "none"
    VALIDATING = "validating"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class RuleType(Enum):
    """Runtime shape a value must have."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    EMAIL = "email"
    URL = "url"


# Validator signature: (rule, value) -> None | Awaitable[None]; raise to fail.
ValidatorFn = Callable[["Rule", Any], Union[None, Awaitable[None]]]

# A field path is either "user.name" / "items[0].sku" or a list of segments.
FieldPath = Union[str, list[Union[str, int]]]


_RULE_KEYS = {
    "required",
    "type",
    "min",
    "max",
    "pattern",
    "validator",
    "message",
    "trigger",
    "warning_only",
}


def _coerce_triggers(value: Any) -> frozenset[Trigger] | None:
    """Normalize a trigger spec (None, str, Trigger, or iterable) to a frozenset."""
    if value is None:
        return None
    if isinstance(value, (str, Trigger)):
        value = [value]
    triggers = set()
    for item in value:
        if isinstance(item, Trigger):
            triggers.add(item)
        elif isinstance(item, str):
            try:
                triggers.add(Trigger(item))
            except ValueError:
                raise ValueError(
                    f"Unknown trigger '{item}'. Expected one of: blur, change"
                ) from None
        else:
            raise TypeError(f"Trigger must be a string or Trigger, got {type(item).__name__}")
    return frozenset(triggers)


@dataclass
class Rule:
    """A declarative validation constraint.

    Attributes:
        required: Value must be present and non-empty
        type: Expected runtime shape (string, number, boolean, array, email, url)
        min: Minimum length (strings/arrays) or minimum value (numbers)
        max: Maximum length (strings/arrays) or maximum value (numbers)
        pattern: Regular expression searched in the stringified value
        validator: Custom check; raising (or an awaitable that raises) fails the rule
        message: Message used on failure (supports {field}, {min}, {max}, {type})
        trigger: Interactions that re-run this rule; None runs only programmatically
        warning_only: Failure is reported as a warning and does not block the form
    """

    required: bool = False
    type: RuleType | None = None
    min: float | None = None
    max: float | None = None
    pattern: re.Pattern | None = None
    validator: ValidatorFn | None = None
    message: str | None = None
    trigger: frozenset[Trigger] | None = None
    warning_only: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.type, str):
            try:
                self.type = RuleType(self.type)
            except ValueError:
                raise ValueError(
                    f"Unknown rule type '{self.type}'. "
                    "Expected one of: " + ", ".join(t.value for t in RuleType)
                ) from None
        if isinstance(self.pattern, str):
            try:
                self.pattern = re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern '{self.pattern}': {e}") from e
        self.trigger = _coerce_triggers(self.trigger)
        if self.validator is not None and not callable(self.validator):
            raise TypeError("Rule validator must be callable")

    def matches(self, trigger: Trigger | None) -> bool:
        """Whether this rule runs for the given interaction.

        Programmatic validation (trigger None) runs every rule.
        """
        if trigger is None:
            return True
        return self.trigger is not None and trigger in self.trigger

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rule":
        """Create a Rule from a YAML/JSON mapping."""
        unknown = set(data) - _RULE_KEYS
        if unknown:
            raise ValueError(f"Unknown rule keys: {', '.join(sorted(unknown))}")

        return cls(
            required=bool(data.get("required", False)),
            type=data.get("type"),
            min=data.get("min"),
            max=data.get("max"),
            pattern=data.get("pattern"),
            validator=data.get("validator"),
            message=data.get("message"),
            trigger=data.get("trigger"),
            warning_only=bool(data.get("warning_only", False)),
        )


RuleSpec = Union[Rule, dict[str, Any], Iterable[Union[Rule, dict[str, Any]]], None]


def normalize_rules(rules: RuleSpec) -> list[Rule]:
    """Turn a single rule, a mapping, or a list of either into a list of Rules.

    Raises:
        TypeError: If an entry is neither a Rule nor a mapping
    """
    if rules is None:
        return []
    if isinstance(rules, (Rule, dict)):
        rules = [rules]

    result = []
    for entry in rules:
        if isinstance(entry, Rule):
            result.append(entry)
        elif isinstance(entry, dict):
            result.append(Rule.from_dict(entry))
        else:
            raise TypeError(
                f"Rule list entries must be Rule or dict, got {type(entry).__name__}"
            )
    return result


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of checking one value against one rule."""

    ok: bool
    message: str | None = None

    @classmethod
    def passed(cls) -> "EvaluationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, message: str) -> "EvaluationResult":
        return cls(ok=False, message=message)


@dataclass(frozen=True)
class ValidationError:
    """A single field failure.

    Attributes:
        field: Path of the field this error relates to
        message: Human-readable message
    """

    field: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message}


@dataclass
class FieldRecord:
    """Validation state for one registered field.

    Owned by FieldRegistry. `status` and `errors` are written only by the
    ValidationOrchestrator; `rules` by the field itself on re-registration.

    Attributes:
        path: Canonical field path
        rules: Ordered rule list (evaluation order)
        status: Current validation status
        errors: Error messages from the most recent completed validation
        warnings: Warning messages from the most recent completed validation
        disabled: Field-level disabled flag (user triggers are skipped)
        generation: Incremented by every validation start or cancellation
    """

    path: str
    rules: list[Rule] = field(default_factory=list)
    status: FieldStatus = FieldStatus.NONE
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    disabled: bool = False
    generation: int = 0

    @property
    def is_required(self) -> bool:
        return any(rule.required for rule in self.rules)

    def reset_state(self) -> None:
        """Force the record back to NONE, invalidating any in-flight run."""
        self.generation += 1
        self.status = FieldStatus.NONE
        self.errors = []
        self.warnings = []


@dataclass
class FieldOutcome:
    """Result of validating one field.

    Attributes:
        path: Field path
        errors: Error messages (at most one, validation is fail-fast)
        warnings: Warning messages from warning-only rules
        applied: False when a newer run superseded this one, or the field
            was unregistered before the run settled
    """

    path: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    applied: bool = True

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def status(self) -> FieldStatus:
        if self.errors:
            return FieldStatus.ERROR
        if self.warnings:
            return FieldStatus.WARNING
        return FieldStatus.SUCCESS

    def to_errors(self) -> list[ValidationError]:
        return [ValidationError(field=self.path, message=m) for m in self.errors]


class ValidationFailed(Exception):
    """Raised by validate()/validate_field() when any field fails.

    The ordered error list is the payload; callers render it directly.

    Attributes:
        errors: ValidationErrors ordered by field registration order
    """

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(summary or "Validation failed")

    @property
    def first_field(self) -> str | None:
        return self.errors[0].field if self.errors else None

    @property
    def error(self) -> ValidationError | None:
        """The first error, for single-field validation."""
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict[str, Any]:
        return {"errors": [e.to_dict() for e in self.errors]}
