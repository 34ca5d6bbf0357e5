"""Library-level error definitions."""

from typing import Any


class UnderstudyError(Exception):
    """Base class for understudy errors."""


class NotCallableError(UnderstudyError, TypeError):
    """Raised when a stub is asked to wrap or call something that is not callable."""

    def __init__(self, value: Any, role: str = "target") -> None:
        super().__init__(
            f"Stub {role} must be callable, got {type(value).__name__}: {value!r}"
        )
        self.value = value
        self.role = role
