"""Lifecycle events emitted by FormController.

Listeners are plain callables registered per event and invoked
synchronously, in subscription order, when the controller emits.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

Listener = Callable[..., Any]


class FormEvent(Enum):
    """Events a form emits, with their listener arguments."""

    VALUES_CHANGE = "valuesChange"  # (changed_values, all_values)
    VALIDATE_SUCCESS = "validateSuccess"  # (values)
    VALIDATE_ERROR = "validateError"  # (errors)
    SUBMIT = "submit"  # (values)
    SCROLL_TO_FIELD = "scrollToField"  # (path)


class EventEmitter:
    """Per-instance listener registry.

    Example:
        emitter.on("valuesChange", lambda changed, values: ...)
        emitter.emit(FormEvent.VALUES_CHANGE, {"a": 1}, {"a": 1, "b": 2})
    """

    def __init__(self) -> None:
        self._listeners: dict[FormEvent, list[Listener]] = {}

    def on(self, event: FormEvent | str, listener: Listener) -> Listener:
        """Subscribe a listener. Returns it, so this works as a decorator."""
        self._listeners.setdefault(FormEvent(event), []).append(listener)
        return listener

    def off(self, event: FormEvent | str, listener: Listener) -> None:
        """Unsubscribe a listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(FormEvent(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: FormEvent, *args: Any) -> None:
        # Listener exceptions propagate to the caller of the emitting operation
        for listener in list(self._listeners.get(event, [])):
            listener(*args)

    def listener_count(self, event: FormEvent | str) -> int:
        return len(self._listeners.get(FormEvent(event), []))
