"""The recording stub.

A `Stub` wraps a target callable and exposes a `StubHandler` that callers
invoke in its place. Every invocation of the handler is recorded as a
`CallRecord`, and the value handed back to the caller is resolved from the
stub's current resolution mode:

* ``NONE`` (default): the handler returns None.
* ``FIXED``: the handler returns the value given to `Stub.returns`.
* ``FAKE``: the handler calls the function given to `Stub.calls_fake` with the
  same arguments and returns its result.

Only the most recently configured mode is active.

Thread-safety
-------------
Appending a record and taking a snapshot of the records happen under a lock,
so concurrent invocations never lose or duplicate a record. Resolution itself
runs outside the lock; a fake that blocks does not serialize other callers.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MethodType, TracebackType
from typing import Any, Generic, ParamSpec, TypeVar

from .calls import CallRecord, strictly_equal
from .errors import NotCallableError

__all__ = ["ResolutionMode", "Stub", "StubHandler"]

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# pylint: disable=protected-access


class ResolutionMode(enum.Enum):
    """How a stub computes the value returned from its handler."""

    NONE = "none"
    FIXED = "fixed"
    FAKE = "fake"


@dataclass(frozen=True, slots=True)
class _Resolution:
    # Swapped as a whole so a concurrent call never sees a half-updated mode.
    mode: ResolutionMode
    value: Any = None


_NO_RETURN = _Resolution(ResolutionMode.NONE)


def _describe(fn: Any) -> str:
    if fn is None:
        return "<missing>"
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


class StubHandler(Generic[P, R]):
    """The callable a `Stub` exposes to callers.

    Calling the handler records the call on its stub and returns the resolved
    value. The handler copies ``__name__``, ``__qualname__`` and ``__doc__``
    from the wrapped callable so it reads like the original in tracebacks and
    reprs.

    When a stub replaces an instance method on a class, the handler acts as a
    descriptor: looking it up through an instance binds that instance as the
    call context. Looking it up on the class returns the handler itself.
    """

    def __init__(self, stub: Stub[P, R]) -> None:
        self._stub = stub
        self.binds_context = False
        original = stub.original
        self.__name__ = "handler"
        self.__qualname__ = self.__name__
        self.__doc__ = None
        if original is not None:
            self.__name__ = getattr(original, "__name__", self.__name__)
            self.__qualname__ = getattr(original, "__qualname__", self.__name__)
            self.__doc__ = getattr(original, "__doc__", None)

    @property
    def stub(self) -> Stub[P, R]:
        """The stub recording calls made through this handler."""
        return self._stub

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R | None:
        return self._stub._handle_call(None, args, kwargs)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None or not self.binds_context:
            return self
        return MethodType(self._call_bound, instance)

    def _call_bound(self, context: Any, *args: Any, **kwargs: Any) -> R | None:
        return self._stub._handle_call(context, args, kwargs)

    def __repr__(self) -> str:
        return f"<StubHandler {self.__qualname__}>"


class Stub(Generic[P, R]):
    """A recording proxy for a single callable.

    Args:
        original: The callable being replaced. May be None when a stub is
            installed on an attribute that did not exist yet.

    Example:
        ```py
        s = Stub(lambda x: x + x).pass_through()
        assert s.handler(5) == 10
        assert s.returned(10)
        assert s.called_with(5)
        ```
    """

    def __init__(self, original: Callable[P, R] | None) -> None:
        self._original = original
        self._calls: list[CallRecord] = []
        self._resolution = _NO_RETURN
        self._lock = threading.Lock()
        self._handler: StubHandler[P, R] = StubHandler(self)
        self.restore_callback: Callable[[], None] | None = None

    # ---- identity ----

    @property
    def original(self) -> Callable[P, R] | None:
        """The wrapped callable, fixed at construction."""
        return self._original

    @property
    def handler(self) -> StubHandler[P, R]:
        """The callable to hand to code under test."""
        return self._handler

    @property
    def mode(self) -> ResolutionMode:
        """The currently active resolution mode."""
        return self._resolution.mode

    # ---- configuration ----

    def returns(self, value: R) -> Stub[P, R]:
        """Make every subsequent call return ``value``.

        Replaces any fake configured with `calls_fake`.
        """
        self._resolution = _Resolution(ResolutionMode.FIXED, value)
        return self

    def calls_fake(self, fn: Callable[P, R]) -> Stub[P, R]:
        """Compute every subsequent return value by calling ``fn``.

        ``fn`` receives the same arguments as the handler. If the handler was
        reached as a bound instance method, ``fn`` is bound to the receiver
        exactly as if it had been defined on the class: plain functions and
        lambdas get the receiver as their first argument, already-bound
        methods keep their own. Replaces any value configured with `returns`.

        Raises:
            NotCallableError: If ``fn`` is not callable.
        """
        if not callable(fn):
            raise NotCallableError(fn, role="fake")
        self._resolution = _Resolution(ResolutionMode.FAKE, fn)
        return self

    def pass_through(self) -> Stub[P, R]:
        """Delegate every subsequent call to the original callable.

        A stub whose original is missing has nothing to delegate to and
        falls back to returning None.
        """
        if self._original is None:
            logger.debug("No original to pass through to for %r", self)
            self._resolution = _NO_RETURN
            return self
        return self.calls_fake(self._original)

    def reset(self) -> None:
        """Forget all recorded calls. The resolution mode is kept."""
        with self._lock:
            self._calls.clear()

    def restore(self) -> None:
        """Undo whatever installed this stub, if anything.

        The restore callback is consumed once it succeeds, so repeated calls
        are no-ops. If the callback raises, it is kept and the error
        propagates; calling `restore` again retries.
        """
        with self._lock:
            callback, self.restore_callback = self.restore_callback, None
        if callback is None:
            return
        try:
            callback()
        except BaseException:
            with self._lock:
                if self.restore_callback is None:
                    self.restore_callback = callback
            raise

    # ---- recorded state ----

    @property
    def calls(self) -> tuple[CallRecord, ...]:
        """Snapshot of all recorded calls in invocation order."""
        with self._lock:
            return tuple(self._calls)

    @property
    def call_count(self) -> int:
        """Number of times the handler has been called."""
        with self._lock:
            return len(self._calls)

    @property
    def called(self) -> bool:
        """Whether the handler has been called at least once."""
        return self.call_count > 0

    def get_call(self, index: int) -> CallRecord | None:
        """Return the call at 0-based ``index``, or None if there is none.

        Negative indices are out of range; they do not count from the end.
        """
        calls = self.calls
        if 0 <= index < len(calls):
            return calls[index]
        return None

    @property
    def first_call(self) -> CallRecord | None:
        """The first recorded call, or None."""
        return self.get_call(0)

    @property
    def last_call(self) -> CallRecord | None:
        """The most recent recorded call, or None."""
        calls = self.calls
        return calls[-1] if calls else None

    def called_with(self, *args: Any, **kwargs: Any) -> bool:
        """Whether any call received exactly these arguments.

        The number of positional arguments and the set of keyword names must
        match, and every value must be strictly equal (see
        `understudy.calls.strictly_equal`).
        """
        return any(call.matches(args, kwargs) for call in self.calls)

    def returned(self, value: Any) -> bool:
        """Whether any call's recorded return value is strictly equal to ``value``.

        Calls whose fake raised are recorded with a None return value.
        """
        return any(strictly_equal(call.return_value, value) for call in self.calls)

    def threw(self, exc_type: type[BaseException] | None = None) -> bool:
        """Whether any call raised while resolving its return value.

        Args:
            exc_type: If given, only exceptions of this type count.
        """
        for call in self.calls:
            if call.exception is None:
                continue
            if exc_type is None or isinstance(call.exception, exc_type):
                return True
        return False

    # ---- invocation ----

    def _handle_call(
        self, context: Any, args: tuple[Any, ...], kwargs: Mapping[str, Any]
    ) -> Any:
        resolution = self._resolution
        try:
            return_value = self._resolve(resolution, context, args, kwargs)
        except BaseException as exc:  # pylint: disable=broad-exception-caught
            logger.debug("Fake for %r raised %r; recording failed call", self, exc)
            self._append(CallRecord(args, kwargs, None, context, exc))
            raise
        self._append(CallRecord(args, kwargs, return_value, context))
        return return_value

    @staticmethod
    def _resolve(
        resolution: _Resolution,
        context: Any,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> Any:
        if resolution.mode is not ResolutionMode.FAKE:
            return resolution.value
        fn = resolution.value
        if context is None:
            return fn(*args, **kwargs)
        # Bind the fake the way the interpreter would bind it as a method.
        binder = getattr(type(fn), "__get__", None)
        if binder is None:
            return fn(context, *args, **kwargs)
        return binder(fn, context, type(context))(*args, **kwargs)

    def _append(self, record: CallRecord) -> None:
        with self._lock:
            self._calls.append(record)

    # ---- context manager ----

    def __enter__(self) -> Stub[P, R]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore()

    def __repr__(self) -> str:
        return (
            f"<Stub {_describe(self._original)} "
            f"calls={self.call_count} mode={self.mode.value}>"
        )
