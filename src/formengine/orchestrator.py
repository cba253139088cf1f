"""Validation orchestration.

Runs a field's rules through the evaluator and writes the outcome back
into its FieldRecord:
- Within a field, rules run sequentially and stop at the first error
- Across fields, validate_all runs every field concurrently and reports
  errors in registration order
- Last validation wins: a run superseded by a newer one for the same
  field (or by a cancel) is dropped instead of applied
"""

import asyncio
import logging

from formengine import paths
from formengine.evaluator import evaluate
from formengine.registry import FieldRegistry
from formengine.types import (
    FieldOutcome,
    FieldPath,
    FieldRecord,
    FieldStatus,
    Trigger,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """Coordinates per-field and whole-form validation over a FieldRegistry."""

    def __init__(self, registry: FieldRegistry):
        self.registry = registry

    async def validate_field(
        self,
        path: FieldPath,
        trigger: Trigger | None = None,
    ) -> FieldOutcome:
        """Validate one field.

        Args:
            path: Field path
            trigger: The interaction that fired, or None for programmatic
                validation (which runs every rule)

        Returns:
            The FieldOutcome. Unknown paths yield an empty, unapplied outcome.
        """
        record = self.registry.get(path)
        if record is None:
            return FieldOutcome(path=paths.join_path(path), applied=False)
        return await self._validate_record(record, trigger)

    async def validate_all(
        self,
        fields: list[FieldPath] | None = None,
        trigger: Trigger | None = None,
    ) -> list[ValidationError]:
        """Validate many fields concurrently.

        Args:
            fields: Paths to validate; defaults to every registered field.
                Unknown paths are ignored.
            trigger: Passed through to each field (None runs every rule)

        Returns:
            Errors ordered by field registration order. Fields unregistered
            before their run settled, and runs superseded or cancelled while
            in flight, are left out.
        """
        records = self.registry.all()
        if fields is not None:
            wanted = {paths.join_path(f) for f in fields}
            records = [r for r in records if r.path in wanted]
        if not records:
            return []

        results = await asyncio.gather(
            *(self._validate_record(r, trigger) for r in records),
            return_exceptions=True,
        )

        errors: list[ValidationError] = []
        for record, result in zip(records, results):
            if isinstance(result, BaseException):
                raise result
            if not result.applied or not self.registry.is_current(record):
                continue
            errors.extend(result.to_errors())
        return errors

    def cancel(self, fields: list[FieldPath] | None = None) -> None:
        """Force fields back to NONE and drop any in-flight results for them."""
        for record in self.select(fields):
            record.reset_state()

    def select(self, fields: list[FieldPath] | None) -> list[FieldRecord]:
        if fields is None:
            return self.registry.all()
        records = []
        for f in fields:
            record = self.registry.get(f)
            if record is not None:
                records.append(record)
        return records

    async def _validate_record(
        self,
        record: FieldRecord,
        trigger: Trigger | None,
    ) -> FieldOutcome:
        if not self.registry.is_current(record):
            return FieldOutcome(path=record.path, applied=False)

        rules = [rule for rule in record.rules if rule.matches(trigger)]
        if not rules:
            return FieldOutcome(path=record.path, applied=False)

        record.generation += 1
        generation = record.generation
        record.status = FieldStatus.VALIDATING

        # Read once; later model writes are picked up by the next run
        value = self.registry.get_value(record.path)

        errors: list[str] = []
        warnings: list[str] = []
        for rule in rules:
            result = await evaluate(rule, value, record.path)
            if result.ok:
                continue
            if rule.warning_only:
                warnings.append(result.message)
                continue
            errors.append(result.message)
            break

        outcome = FieldOutcome(path=record.path, errors=errors, warnings=warnings)

        if record.generation != generation or not self.registry.is_current(record):
            logger.debug("Discarding superseded validation of '%s'", record.path)
            outcome.applied = False
            return outcome

        record.status = outcome.status
        record.errors = list(errors)
        record.warnings = list(warnings)
        logger.debug("Validated '%s': %s", record.path, record.status.value)
        return outcome
