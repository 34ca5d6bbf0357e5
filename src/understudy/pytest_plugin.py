"""pytest integration for understudy.

Registered through the ``pytest11`` entry point, so it is active whenever
understudy is installed.

Provides:
- ``stub_registry``: a fresh `PatchRegistry` per test, drained at teardown.
- An autouse teardown that drains `default_registry` after every test, so a
  forgotten ``restore()`` never leaks a patch into the next test. Disable
  with ``understudy_autorestore = false`` in the ini file. The drain also
  undoes default-registry patches made by module- or session-scoped
  fixtures; such fixtures should patch through their own `PatchRegistry`.
- ``--understudy-trace``: stream understudy's DEBUG logs (every patch and
  restore) to the console.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from .config import AUTORESTORE_INI
from .logging import disable_console_logging, enable_console_logging
from .registry import PatchRegistry, default_registry

logger = logging.getLogger(__name__)

TRACE_OPTION = "--understudy-trace"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register understudy's command-line flag and ini setting."""
    group = parser.getgroup("understudy")
    group.addoption(
        TRACE_OPTION,
        action="store_true",
        default=False,
        help="Log every stub patch and restore to the console.",
    )
    parser.addini(
        AUTORESTORE_INI,
        type="bool",
        default=True,
        help="Restore all stubs in the default registry after each test.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Enable console tracing when requested."""
    if config.getoption(TRACE_OPTION):
        enable_console_logging(logging.DEBUG)


def pytest_unconfigure(config: pytest.Config) -> None:
    """Detach the tracing handler installed in `pytest_configure`."""
    if config.getoption(TRACE_OPTION):
        disable_console_logging()


@pytest.fixture
def stub_registry() -> Iterator[PatchRegistry]:
    """A private patch registry, restored when the test finishes.

    Example:
        ```py
        def test_clock(stub_registry):
            stub_method(time, "time", registry=stub_registry).returns(0.0)
        ```
    """
    registry = PatchRegistry()
    yield registry
    registry.restore_all()


@pytest.fixture(autouse=True)
def _understudy_autorestore(request: pytest.FixtureRequest) -> Iterator[None]:
    yield
    if request.config.getini(AUTORESTORE_INI):
        if restored := default_registry.restore_all():
            logger.debug(
                "Auto-restored %d stub(s) left active by %s", restored, request.node.nodeid
            )
