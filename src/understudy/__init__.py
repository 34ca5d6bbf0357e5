"""UNDERSTUDY

A minimal test-double engine. It replaces a callable (a free function or an
object's method) with a recording stub that can optionally fabricate return
values, and restores the original behavior afterwards.
"""

from .api import restore, spy, spy_method, stub, stub_method
from .calls import CallRecord, strictly_equal
from .errors import NotCallableError, UnderstudyError
from .registry import PatchRegistry, default_registry
from .stubs import ResolutionMode, Stub, StubHandler

__all__ = [
    "CallRecord",
    "NotCallableError",
    "PatchRegistry",
    "ResolutionMode",
    "Stub",
    "StubHandler",
    "UnderstudyError",
    "__version__",
    "default_registry",
    "restore",
    "spy",
    "spy_method",
    "strictly_equal",
    "stub",
    "stub_method",
]
__version__ = "0.1.0"
