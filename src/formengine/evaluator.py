"""Rule evaluation.

Checks a single value against a single rule:
- required: value must be present and non-empty
- type: runtime shape (string, number, boolean, array) or format (email, url)
- min/max: length bounds for strings and arrays, value bounds for numbers
- pattern: regex search against the stringified value
- validator: caller-supplied callable, sync or async

Evaluation never raises for a failing value; failures come back as data.
"""

import inspect
import logging
import math
import re
from typing import Any

from formengine.types import EvaluationResult, Rule, RuleType

logger = logging.getLogger(__name__)


# =============================================================================
# Format Patterns
# =============================================================================

# Email: conservative local@domain.tld check, not full RFC 5322
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# URL: http(s) scheme followed by a host
URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

# Placeholders accepted in rule messages
MESSAGE_PATTERN = re.compile(r"\{(?P<name>field|min|max|type)\}")

DEFAULT_FIELD_LABEL = "Value"


# =============================================================================
# Value helpers
# =============================================================================


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty for the required check."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return True
    return False


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _measure(value: Any) -> tuple[float, str] | None:
    """Return the quantity min/max compare against, and its unit, or None if inapplicable."""
    if isinstance(value, str):
        return len(value), "characters"
    if isinstance(value, (list, tuple)):
        return len(value), "items"
    if _is_number(value):
        return value, ""
    return None


def _format_bound(bound: float) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def interpolate(template: str, rule: Rule, field: str | None) -> str:
    """Fill {field}, {min}, {max} and {type} placeholders in a rule message."""

    def replace(match: re.Match) -> str:
        name = match.group("name")
        if name == "field":
            return field or DEFAULT_FIELD_LABEL
        if name == "type":
            return rule.type.value if rule.type else ""
        bound = getattr(rule, name)
        return _format_bound(bound) if bound is not None else ""

    return MESSAGE_PATTERN.sub(replace, template)


# =============================================================================
# Individual checks
# =============================================================================


def _check_type(rule_type: RuleType, value: Any, label: str) -> str | None:
    """Return a generic failure message, or None if the value has the right shape."""
    if rule_type == RuleType.STRING:
        if not isinstance(value, str):
            return f"{label} must be a string"
    elif rule_type == RuleType.NUMBER:
        if not _is_number(value):
            return f"{label} must be a number"
    elif rule_type == RuleType.BOOLEAN:
        if not isinstance(value, bool):
            return f"{label} must be a boolean"
    elif rule_type == RuleType.ARRAY:
        if not isinstance(value, (list, tuple)):
            return f"{label} must be an array"
    elif rule_type == RuleType.EMAIL:
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
            return f"{label} must be a valid email address"
    elif rule_type == RuleType.URL:
        if not isinstance(value, str) or not URL_PATTERN.match(value):
            return f"{label} must be a valid URL"
    return None


def _check_bounds(rule: Rule, value: Any, label: str) -> str | None:
    measured = _measure(value)
    if measured is None:
        return None
    quantity, unit = measured
    suffix = f" {unit}" if unit else ""

    if rule.min is not None and quantity < rule.min:
        return f"{label} must be at least {_format_bound(rule.min)}{suffix}"
    if rule.max is not None and quantity > rule.max:
        return f"{label} must be at most {_format_bound(rule.max)}{suffix}"
    return None


async def _run_validator(rule: Rule, value: Any, field: str | None, label: str) -> str | None:
    """Run a custom validator; any exception it raises becomes a failure message.

    The exception text is used verbatim. Only the rule message is interpolated.
    """
    try:
        outcome = rule.validator(rule, value)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.debug("Validator for %s failed: %r", label, e)
        message = str(e) if e.args else ""
        if message:
            return message
        if rule.message:
            return interpolate(rule.message, rule, field)
        return f"{label} is invalid"
    return None


# =============================================================================
# Rule evaluation
# =============================================================================


def _builtin_checks(rule: Rule, value: Any, label: str) -> str | None:
    """Run required/type/bounds/pattern in order; first generic failure message wins."""
    if rule.required and is_empty(value):
        return f"{label} is required"

    # Remaining built-in checks don't apply to an empty optional value
    if is_empty(value):
        return None

    if rule.type is not None:
        type_error = _check_type(rule.type, value, label)
        if type_error:
            return type_error

    if rule.min is not None or rule.max is not None:
        bound_error = _check_bounds(rule, value, label)
        if bound_error:
            return bound_error

    if rule.pattern is not None:
        if not rule.pattern.search(str(value)):
            return f"{label} format is invalid"

    return None


async def evaluate(rule: Rule, value: Any, field: str | None = None) -> EvaluationResult:
    """Check a value against one rule.

    Args:
        rule: The rule to apply
        value: The value read from the model
        field: Field path or label used in generic messages

    Returns:
        EvaluationResult; on failure the message is the rule's own message
        (interpolated) or a generic description of the failing check.
    """
    label = field or DEFAULT_FIELD_LABEL

    generic = _builtin_checks(rule, value, label)
    if generic is not None:
        if rule.message:
            return EvaluationResult.failed(interpolate(rule.message, rule, field))
        return EvaluationResult.failed(generic)

    if rule.validator is not None:
        validator_message = await _run_validator(rule, value, field, label)
        if validator_message is not None:
            return EvaluationResult.failed(validator_message)

    return EvaluationResult.passed()
