"""Global pytest fixtures and default marks for understudy's suite."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from understudy import default_registry

pytest_plugins = ["pytester"]

TESTS_ROOT = Path(__file__).parent.resolve()

# Top-level test directory -> marker applied to every item collected from it.
DIRECTORY_MARKERS = {
    "unit": pytest.mark.unit,
    "integration": pytest.mark.integration,
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config,  # pylint: disable=unused-argument
    items: list[pytest.Item],
) -> None:
    """Mark items by the directory they live in, unless already marked."""
    for item in items:
        path = item.path.resolve()
        if TESTS_ROOT not in path.parents:
            continue
        mark = DIRECTORY_MARKERS.get(path.relative_to(TESTS_ROOT).parts[0])
        if mark is None:
            continue
        if not any(marker.name == mark.name for marker in item.iter_markers()):
            item.add_marker(mark)


@pytest.fixture
def clean_default_registry() -> Iterator[None]:
    """Guarantee the default registry is empty before and after the test.

    The plugin's autouse teardown already drains it after every test; this
    fixture also asserts nothing leaked in from elsewhere.
    """
    assert len(default_registry) == 0, f"leaked stubs: {list(default_registry)}"
    yield
    default_registry.restore_all()
