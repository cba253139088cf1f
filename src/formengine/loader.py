"""Load form definitions from YAML files.

A form definition declares options, an initial model, form-level rules
and the fields to register:

    form:
      options: {scroll_to_error: true}
      model: {username: "", email: ""}
      rules:
        email: {type: email, message: "Invalid email format"}
      fields:
        - name: username
          required: true
          rules:
            - {min: 3, message: "Username must be at least 3 characters", trigger: blur}
        - name: email

Documents are checked against the bundled JSON Schema before they are
turned into Rules; custom validators are referenced by registered name.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JSONSchemaError

from formengine.config import FormOptions
from formengine.controller import FormController
from formengine.paths import join_path
from formengine.types import Rule
from formengine.validators import ValidatorRegistry

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "form.schema.json"


# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------


@dataclass
class SchemaIssue:
    """A single problem found in a form definition file."""

    file: Path | None
    message: str
    path: str = ""  # location within the document, e.g. "form/fields[0]/rules"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        source = self.file if self.file is not None else "<form>"
        return f"[ERROR] {source}{loc}: {self.message}"


class SchemaError(ValueError):
    """Raised when a form definition is malformed."""

    def __init__(self, issues: list[SchemaIssue]):
        self.issues = issues
        super().__init__("\n".join(str(issue) for issue in issues))


@dataclass
class FieldDefinition:
    """A field declared in a form definition."""

    name: str
    label: str | None = None
    required: bool = False
    disabled: bool = False
    rules: list[Rule] = field(default_factory=list)


@dataclass
class FormDefinition:
    """A parsed form definition."""

    fields: list[FieldDefinition] = field(default_factory=list)
    model: dict[str, Any] = field(default_factory=dict)
    rules: dict[str, list[Rule]] = field(default_factory=dict)
    options: FormOptions = field(default_factory=FormOptions)
    source: Path | None = None

    def build(self, model: dict[str, Any] | None = None) -> FormController:
        """Create a FormController and register every declared field.

        Args:
            model: Model to bind; defaults to a deep copy of the declared model
        """
        if model is None:
            model = copy.deepcopy(self.model)
        form = FormController(
            model=model,
            rules=self.rules,
            options=copy.copy(self.options),
        )
        for definition in self.fields:
            form.register_field(
                definition.name,
                definition.rules or None,
                required=definition.required,
                disabled=definition.disabled,
            )
        return form


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: JSONSchemaError) -> str:
    """Convert a jsonschema error path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _rule_from_config(data: dict[str, Any]) -> Rule:
    """Build a Rule, resolving a named validator through ValidatorRegistry."""
    data = dict(data)
    name = data.get("validator")
    if name is not None:
        data["validator"] = ValidatorRegistry.get(name)
    return Rule.from_dict(data)


def _rules_from_config(spec: Any) -> list[Rule]:
    if spec is None:
        return []
    if isinstance(spec, dict):
        spec = [spec]
    return [_rule_from_config(item) for item in spec]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_form_document(doc: Any, source: Path | None = None) -> list[SchemaIssue]:
    """Check a parsed document against the form JSON Schema.

    Returns:
        A list of SchemaIssue objects (empty on success)
    """
    validator = Draft202012Validator(_load_schema())
    return [
        SchemaIssue(file=source, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]


def parse_form(doc: dict[str, Any], source: Path | None = None) -> FormDefinition:
    """Turn a parsed document into a FormDefinition.

    Raises:
        SchemaError: If the document does not match the schema, or names
            an unregistered validator
    """
    issues = validate_form_document(doc, source)
    if issues:
        raise SchemaError(issues)

    form = doc.get("form") or {}
    try:
        fields = [
            FieldDefinition(
                name=join_path(item["name"]),
                label=item.get("label"),
                required=item.get("required", False),
                disabled=item.get("disabled", False),
                rules=_rules_from_config(item.get("rules")),
            )
            for item in form.get("fields", [])
        ]
        rules = {
            join_path(path): _rules_from_config(spec)
            for path, spec in form.get("rules", {}).items()
        }
    except ValueError as e:
        raise SchemaError([SchemaIssue(file=source, message=str(e))]) from e

    definition = FormDefinition(
        fields=fields,
        model=form.get("model") or {},
        rules=rules,
        options=FormOptions.from_dict(form.get("options")),
        source=source,
    )
    logger.debug("Parsed form definition with %d field(s)", len(fields))
    return definition


def load_form(path: Path) -> FormDefinition:
    """Load and parse a YAML form definition file.

    Raises:
        SchemaError: If the file can't be parsed or is malformed
    """
    try:
        with path.open() as fh:
            doc = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise SchemaError([SchemaIssue(file=path, message=f"YAML parse error: {exc}")]) from exc

    if doc is None:
        raise SchemaError(
            [SchemaIssue(file=path, message="File is empty or contains only whitespace")]
        )
    return parse_form(doc, source=path)


def load_data(path: Path) -> dict[str, Any]:
    """Load a data record from a YAML or JSON file (JSON is valid YAML).

    Raises:
        ValueError: If the file can't be parsed or isn't a mapping
    """
    try:
        with path.open() as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ValueError(f"{path}: parse error: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data
