"""Entry points for creating stubs and spies and for restoring patches.

- `stub` / `spy` wrap free callables and never touch any object.
- `stub_method` / `spy_method` replace an attribute on an object and register
  the stub with a `PatchRegistry` (the process-wide `default_registry` unless
  one is passed).
- `restore` reverts everything a registry has patched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from .errors import NotCallableError
from .registry import PatchRegistry, default_registry
from .stubs import Stub

__all__ = ["restore", "spy", "spy_method", "stub", "stub_method"]

P = ParamSpec("P")
R = TypeVar("R")


def _noop(*args: Any, **kwargs: Any) -> None:  # pylint: disable=unused-argument
    return None


def stub(fn: Callable[P, R]) -> Stub[P, R]:
    """Wrap ``fn`` in a stub without installing it anywhere.

    The stub returns None until configured; `Stub.restore` is a no-op.

    Raises:
        NotCallableError: If ``fn`` is not callable.
    """
    if not callable(fn):
        raise NotCallableError(fn)
    return Stub(fn)


def spy() -> Stub[..., Any]:
    """Create an anonymous stub around a no-op accepting any arguments.

    Annotate the result at the call site to fix its signature, e.g.
    ``s: Stub[[int], str] = spy()``.
    """
    return Stub(_noop)


def stub_method(
    obj: Any, key: str, *, registry: PatchRegistry | None = None
) -> Stub[..., Any]:
    """Replace ``obj.key`` with a stub's handler.

    Args:
        obj: Instance, class or module owning the attribute.
        key: Attribute name. It may not exist yet.
        registry: Registry tracking the patch. Defaults to `default_registry`.

    Returns:
        Stub: The installed stub; ``obj.key`` is its handler until restored.
    """
    return (registry if registry is not None else default_registry).patch(obj, key)


def spy_method(
    obj: Any, key: str, *, registry: PatchRegistry | None = None
) -> Stub[..., Any]:
    """Like `stub_method`, but calls still reach the wrapped implementation."""
    return stub_method(obj, key, registry=registry).pass_through()


def restore(registry: PatchRegistry | None = None) -> None:
    """Restore every stub patched through ``registry`` and empty it.

    Args:
        registry: Registry to drain. Defaults to `default_registry`.

    Raises:
        ExceptionGroup: If some patches could not be reverted. Every other
            patch is still restored and the registry is left empty.
    """
    (registry if registry is not None else default_registry).restore_all()
