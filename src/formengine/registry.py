"""Field registry for formengine.

Keeps one FieldRecord per registered field path, in registration order,
and resolves field values against the shared model.
"""

import copy
import logging
from typing import Any, Iterator

from formengine import paths
from formengine.types import FieldPath, FieldRecord, Rule

logger = logging.getLogger(__name__)


class FieldRegistry:
    """Ordered store of FieldRecords keyed by canonical field path.

    Registration order is preserved and drives the order of reported
    errors. The initial value of each field is snapshotted the first
    time its path registers, for reset_fields().

    Example:
        registry = FieldRegistry({"user": {"name": ""}})
        record = registry.register("user.name", [Rule(required=True)])
        registry.set_value("user.name", "Ada")
    """

    def __init__(self, model: dict[str, Any] | None = None):
        self.model: dict[str, Any] = model if model is not None else {}
        self._records: dict[str, FieldRecord] = {}
        self._snapshots: dict[str, Any] = {}

    def register(
        self,
        path: FieldPath,
        rules: list[Rule],
        disabled: bool = False,
    ) -> FieldRecord:
        """Register a field, or replace the rules of an already registered one.

        Re-registration keeps the record's status, errors and position.

        Args:
            path: Field path
            rules: Ordered rule list
            disabled: Field-level disabled flag

        Returns:
            The FieldRecord for this path
        """
        key = paths.join_path(path)

        if key not in self._snapshots:
            self._snapshots[key] = copy.deepcopy(self.get_value(key))

        record = self._records.get(key)
        if record is not None:
            record.rules = list(rules)
            record.disabled = disabled
            logger.debug("Re-registered field '%s' with %d rule(s)", key, len(rules))
            return record

        record = FieldRecord(path=key, rules=list(rules), disabled=disabled)
        self._records[key] = record
        logger.debug("Registered field '%s' with %d rule(s)", key, len(rules))
        return record

    def unregister(self, path: FieldPath) -> None:
        """Remove a field. Unknown paths are ignored (unmount may race teardown)."""
        key = paths.join_path(path)
        record = self._records.pop(key, None)
        if record is None:
            return
        # Any run still in flight for this record must not write back
        record.generation += 1
        logger.debug("Unregistered field '%s'", key)

    def get(self, path: FieldPath) -> FieldRecord | None:
        return self._records.get(paths.join_path(path))

    def all(self) -> list[FieldRecord]:
        """All records in registration order."""
        return list(self._records.values())

    def paths(self) -> list[str]:
        return list(self._records.keys())

    def is_current(self, record: FieldRecord) -> bool:
        """Whether `record` is still the registered record for its path."""
        return self._records.get(record.path) is record

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, list)):
            return False
        return paths.join_path(path) in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FieldRecord]:
        return iter(self.all())

    # -------------------------------------------------------------------------
    # Model access
    # -------------------------------------------------------------------------

    def get_value(self, path: FieldPath) -> Any:
        return paths.get_value(self.model, path)

    def set_value(self, path: FieldPath, value: Any) -> None:
        paths.set_value(self.model, path, value)

    def initial_value(self, path: FieldPath) -> Any:
        """A fresh copy of the value snapshotted when `path` first registered."""
        return copy.deepcopy(self._snapshots.get(paths.join_path(path)))

    def has_snapshot(self, path: FieldPath) -> bool:
        return paths.join_path(path) in self._snapshots
