"""formengine: declarative form validation.

Components, leaves first:
- Rule evaluation: checks one value against one rule
- FieldRegistry: registered fields and their validation state
- ValidationOrchestrator: per-field fail-fast, whole-form concurrent validation
- FormController: the public façade (validate, reset, model access, events)
- FormField: the adapter a UI field element drives

Usage:
    from formengine import FormController, FormField, Rule, ValidationFailed

    form = FormController(model={"email": "invalid-email"})
    FormField(form, "email", rules=Rule(type="email")).mount()

    try:
        await form.validate()
    except ValidationFailed as e:
        print(e.errors)
"""

from formengine.config import FormOptions
from formengine.controller import FormController
from formengine.evaluator import EMAIL_PATTERN, URL_PATTERN, evaluate, is_empty
from formengine.events import EventEmitter, FormEvent
from formengine.field import FormField
from formengine.loader import (
    FieldDefinition,
    FormDefinition,
    SchemaError,
    SchemaIssue,
    load_form,
    parse_form,
)
from formengine.orchestrator import ValidationOrchestrator
from formengine.registry import FieldRegistry
from formengine.types import (
    EvaluationResult,
    FieldOutcome,
    FieldRecord,
    FieldStatus,
    Rule,
    RuleType,
    Trigger,
    ValidationError,
    ValidationFailed,
    normalize_rules,
)
from formengine.validators import ValidatorRegistry, validator

__all__ = [
    # Types
    "EvaluationResult",
    "FieldOutcome",
    "FieldRecord",
    "FieldStatus",
    "Rule",
    "RuleType",
    "Trigger",
    "ValidationError",
    "ValidationFailed",
    "normalize_rules",
    # Evaluation
    "EMAIL_PATTERN",
    "URL_PATTERN",
    "evaluate",
    "is_empty",
    # Registry and orchestration
    "FieldRegistry",
    "ValidationOrchestrator",
    # Façade
    "EventEmitter",
    "FormController",
    "FormEvent",
    "FormField",
    "FormOptions",
    # Definitions
    "FieldDefinition",
    "FormDefinition",
    "SchemaError",
    "SchemaIssue",
    "load_form",
    "parse_form",
    # Custom validators
    "ValidatorRegistry",
    "validator",
]
