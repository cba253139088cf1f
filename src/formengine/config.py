"""Form-level options and environment configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

LOG_LEVEL_ENV = "FORMENGINE_LOG_LEVEL"


@dataclass
class FormOptions:
    """Behavioral options for a FormController.

    Attributes:
        disabled: Disable the whole form; user-interaction triggers are
            skipped, programmatic validation still runs
        scroll_to_error: Emit scrollToField with the first failing field
            when validate() fails
        clear_on_rule_change: Clear a field's validation state when its
            rules are replaced
    """

    disabled: bool = False
    scroll_to_error: bool = False
    clear_on_rule_change: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FormOptions:
        """Create FormOptions from a YAML/JSON mapping."""
        data = data or {}
        return cls(
            disabled=bool(data.get("disabled", False)),
            scroll_to_error=bool(data.get("scroll_to_error", False)),
            clear_on_rule_change=bool(data.get("clear_on_rule_change", False)),
        )


def parse_log_level(raw: str) -> int | None:
    """Resolve a level name ("debug", "INFO") or number; None if unknown."""
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else None


def log_level_from_env(default: str = "WARNING") -> int:
    """Resolve the log level from FORMENGINE_LOG_LEVEL.

    Unknown values fall back to `default`.
    """
    level = parse_log_level(os.environ.get(LOG_LEVEL_ENV, default))
    if level is None:
        level = parse_log_level(default)
    return level
