"""Call records and the strict comparison used to query them.

A `CallRecord` is the immutable snapshot a stub takes of one invocation of its
handler. Records are never mutated after creation; a stub only appends new
records or drops all of them on `reset()`.

Comparisons against recorded arguments and return values are **strict**:
two values match when they are the same object, or when they are equal
immutable scalars of exactly the same type. Containers and arbitrary objects
are compared by identity only, so two distinct lists with equal contents do
not match.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

__all__ = ["CallRecord", "strictly_equal"]

# Types compared by value; everything else is compared by identity.
_VALUE_TYPES: tuple[type, ...] = (bool, int, float, complex, str, bytes)

_EMPTY_KWARGS: Mapping[str, Any] = MappingProxyType({})


def strictly_equal(a: Any, b: Any) -> bool:
    """Return True if ``a`` and ``b`` are strictly equal.

    Args:
        a: First value.
        b: Second value.

    Returns:
        bool: True when ``a is b``, or when both are scalars of the exact same
        type that compare equal. ``1``, ``1.0`` and ``True`` are therefore
        all distinct.
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _VALUE_TYPES):
        return False
    return bool(a == b)


def _freeze_kwargs(kwargs: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not kwargs:
        return _EMPTY_KWARGS
    return MappingProxyType(dict(kwargs))


@dataclass(frozen=True, slots=True)
class CallRecord:
    """Immutable snapshot of one handler invocation.

    Attributes:
        args: Positional arguments exactly as received. Omitted trailing
            optional arguments are not padded in.
        kwargs: Read-only mapping of keyword arguments (empty if none).
        return_value: The value handed back to the caller, or None when no
            return was configured or the fake raised.
        call_context: The receiver when the handler was invoked as an
            instance method of a patched class, otherwise None.
        exception: The exception raised by the fake while resolving the
            return value, otherwise None.
    """

    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    return_value: Any = None
    call_context: Any = None
    exception: BaseException | None = None

    def __post_init__(self) -> None:
        # slots + frozen: go through object.__setattr__ to normalize inputs
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "kwargs", _freeze_kwargs(self.kwargs))

    def matches(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> bool:
        """Return True if this call received exactly ``args`` and ``kwargs``.

        Lengths must agree and every value must be strictly equal to its
        counterpart (see `strictly_equal`).
        """
        if len(self.args) != len(args) or self.kwargs.keys() != kwargs.keys():
            return False
        if not all(strictly_equal(a, b) for a, b in zip(self.args, args)):
            return False
        return all(strictly_equal(self.kwargs[k], v) for k, v in kwargs.items())

    @property
    def raised(self) -> bool:
        """Whether resolving this call's return value raised."""
        return self.exception is not None
