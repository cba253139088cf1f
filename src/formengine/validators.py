"""Named validator registry.

Form definitions loaded from YAML can't carry callables, so custom
validators are registered under a name at application startup and
referenced from rule definitions (`validator: "username_available"`).
"""

from typing import Callable

from formengine.types import ValidatorFn


class ValidatorRegistry:
    """Name-to-callable lookup for `validator:` entries in form definitions.

    A YAML rule naming a validator resolves at load time, so the callable
    has to be in here before `load_form` runs.

    Example:
        @validator("username_available")
        async def username_available(rule, value):
            if await taken(value):
                raise ValueError("Username is taken")

        fn = ValidatorRegistry.get("username_available")
    """

    _validators: dict[str, ValidatorFn] = {}

    @classmethod
    def register(cls, name: str, fn: ValidatorFn) -> None:
        """Bind `name` to `fn`. The first binding for a name is kept."""
        if name in cls._validators:
            return
        cls._validators[name] = fn

    @classmethod
    def get(cls, name: str) -> ValidatorFn:
        """Look up the callable a form definition refers to.

        Raises:
            ValueError: If nothing is bound to `name`
        """
        if name not in cls._validators:
            raise ValueError(
                f"Validator '{name}' is not registered; "
                "bind it with @validator(name) before loading the form."
            )
        return cls._validators[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._validators

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._validators.keys())

    @classmethod
    def clear(cls) -> None:
        """Drop every binding."""
        cls._validators.clear()


def validator(name: str) -> Callable[[ValidatorFn], ValidatorFn]:
    """Bind the decorated function under `name`.

    Usage:
        @validator("even")
        def even(rule, value):
            if value % 2:
                raise ValueError("Must be even")
    """

    def decorator(fn: ValidatorFn) -> ValidatorFn:
        ValidatorRegistry.register(name, fn)
        return fn

    return decorator
