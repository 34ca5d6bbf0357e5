"""Bookkeeping for stubs that have replaced an attribute on some object.

A `PatchRegistry` owns every stub it installed via `PatchRegistry.patch`
until that stub is restored, either individually (`Stub.restore`) or in bulk
(`PatchRegistry.restore_all`). Tests usually share the process-wide
`default_registry`; isolated suites can construct their own.

Thread-safety
-------------
Installing a stub, registering it, reverting its slot and unregistering it
all happen under one re-entrant lock. A stub is therefore never observed as
installed but unregistered (or the reverse), and `restore_all` works on a
consistent snapshot of the members present when it starts.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from functools import partial
from typing import Any

from .patching import Slot, describe_owner
from .stubs import Stub

__all__ = ["PatchRegistry", "default_registry"]

logger = logging.getLogger(__name__)


class PatchRegistry:
    """Tracks active patching stubs so they can be restored together."""

    def __init__(self) -> None:
        # dict as an insertion-ordered set
        self._stubs: dict[Stub[..., Any], None] = {}
        self._lock = threading.RLock()

    def patch(self, obj: Any, key: str) -> Stub[..., Any]:
        """Replace ``obj.key`` with a new stub's handler and track the stub.

        The attribute does not have to exist; a missing attribute is created
        and removed again on restore.

        Args:
            obj: Instance, class or module owning the attribute.
            key: Attribute name.

        Returns:
            Stub: The installed stub. Its `original` is the value
            ``getattr(obj, key)`` returned before patching (None if missing).

        Raises:
            AttributeError: If ``obj`` does not accept the assignment.
            TypeError: If ``obj`` does not accept the assignment.
        """
        with self._lock:
            slot = Slot.capture(obj, key)
            instance: Stub[..., Any] = Stub(getattr(obj, key, None))
            instance.handler.binds_context = slot.binds_context
            slot.install(instance.handler)
            instance.restore_callback = partial(self._unpatch, instance, slot)
            self.add(instance)
        logger.debug(
            "Patched %s.%s (existed=%s, binds_context=%s)",
            describe_owner(obj),
            key,
            slot.existed,
            slot.binds_context,
        )
        return instance

    def _unpatch(self, instance: Stub[..., Any], slot: Slot) -> None:
        with self._lock:
            slot.revert()
            self.discard(instance)
        logger.debug("Restored %s.%s", describe_owner(slot.owner), slot.name)

    def add(self, instance: Stub[..., Any]) -> None:
        """Track ``instance``. Adding a tracked stub again has no effect."""
        with self._lock:
            self._stubs[instance] = None

    def discard(self, instance: Stub[..., Any]) -> None:
        """Stop tracking ``instance`` if tracked."""
        with self._lock:
            self._stubs.pop(instance, None)

    def restore_all(self) -> int:
        """Restore every tracked stub, most recent first, and clear the registry.

        Restoring in reverse order unwinds stacked patches of the same
        attribute back to the value present before the first one. A stub that
        fails to restore does not stop the others; it keeps its restore
        callback, so `Stub.restore` can retry it once the cause is fixed.

        Returns:
            int: Number of stubs that were tracked when the call started.

        Raises:
            ExceptionGroup: If any stub failed to restore, with one exception
                per failure. The registry is cleared regardless.
        """
        errors: list[Exception] = []
        with self._lock:
            snapshot = list(reversed(self._stubs))
            if snapshot:
                logger.debug("Restoring %d patched attribute(s)", len(snapshot))
            try:
                for instance in snapshot:
                    try:
                        instance.restore()
                    except Exception as exc:  # pylint: disable=broad-exception-caught
                        logger.warning("Failed to restore %r: %s", instance, exc)
                        errors.append(exc)
            finally:
                self._stubs.clear()
        if errors:
            raise ExceptionGroup(
                f"Failed to restore {len(errors)} of {len(snapshot)} patched attribute(s)",
                errors,
            )
        return len(snapshot)

    def __contains__(self, instance: object) -> bool:
        with self._lock:
            return instance in self._stubs

    def __len__(self) -> int:
        with self._lock:
            return len(self._stubs)

    def __iter__(self) -> Iterator[Stub[..., Any]]:
        with self._lock:
            return iter(list(self._stubs))

    def __repr__(self) -> str:
        return f"<PatchRegistry active={len(self)}>"


# Process-wide registry used when callers don't pass one explicitly.
default_registry = PatchRegistry()
