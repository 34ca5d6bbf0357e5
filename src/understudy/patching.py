"""Attribute slots that a stub can be installed into and reverted from.

A `Slot` remembers the **raw** value an owner object held under a name before
patching, as found in the owner's own namespace (``vars(owner)``). Reverting
writes that raw value back, so ``staticmethod``/``classmethod`` wrappers and
instance-level overrides survive a patch/restore round trip unchanged. When
the name was not in the owner's own namespace (inherited from a class, or not
present at all), reverting deletes the installed value so lookups fall back
to where they resolved before.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any

from .stubs import StubHandler

__all__ = ["Slot", "describe_owner"]


class _Missing:
    """Marker for a name absent from an owner's own namespace."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


def _own_value(owner: Any, name: str) -> Any:
    try:
        namespace = vars(owner)
    except TypeError:
        # no __dict__ (e.g. __slots__ instances): the slot itself is the namespace
        return getattr(owner, name, MISSING)
    return namespace.get(name, MISSING)


def _is_instance_method(raw: Any) -> bool:
    if isinstance(raw, StubHandler):
        return raw.binds_context
    if isinstance(raw, (staticmethod, classmethod)):
        return False
    # non-data descriptors bind the receiver: functions, lru_cache wrappers,
    # partialmethod, builtin method descriptors such as list.append
    kind = type(raw)
    return hasattr(kind, "__get__") and not (
        hasattr(kind, "__set__") or hasattr(kind, "__delete__")
    )


def describe_owner(owner: Any) -> str:
    """Short human-readable name for a patch target, used in log messages."""
    if inspect.ismodule(owner) or isinstance(owner, type):
        return owner.__name__
    return f"{type(owner).__name__} instance"


@dataclass(frozen=True, slots=True)
class Slot:
    """A named attribute on an owner object, captured before patching.

    Attributes:
        owner: The object whose attribute is patched (instance, class or module).
        name: The attribute name.
        saved: The raw value from the owner's own namespace, or `MISSING`.
        binds_context: True when the owner is a class and the name resolves to
            a method-like descriptor (a function, `lru_cache` wrapper,
            `partialmethod` or builtin method), i.e. calls through instances
            carry a receiver. Static and class methods never do.
    """

    owner: Any
    name: str
    saved: Any
    binds_context: bool = False

    @classmethod
    def capture(cls, owner: Any, name: str) -> Slot:
        """Record the current state of ``owner.name``."""
        binds = isinstance(owner, type) and _is_instance_method(
            inspect.getattr_static(owner, name, None)
        )
        return cls(owner, name, _own_value(owner, name), binds)

    @property
    def existed(self) -> bool:
        """Whether the owner held the name in its own namespace."""
        return self.saved is not MISSING

    def install(self, value: Any) -> None:
        """Write ``value`` into the slot."""
        setattr(self.owner, self.name, value)

    def revert(self) -> None:
        """Put back whatever the slot held when it was captured."""
        if self.existed:
            setattr(self.owner, self.name, self.saved)
        elif _own_value(self.owner, self.name) is not MISSING:
            delattr(self.owner, self.name)
