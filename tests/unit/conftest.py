"""Marks for `tests/unit/`.

Unit tests run against fakes, mocks, or the in-memory ledger only, so
``-m unit`` gives a run that never needs a node.
"""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

UNIT_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark every item below `tests/unit/` as `unit` unless it says otherwise."""
    for item in items:
        if UNIT_ROOT in item.path.resolve().parents and item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)
