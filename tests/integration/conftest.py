"""Marks for `tests/integration/`.

Integration tests talk to a live node. Every item here is marked
`integration` and skipped while ``NODETASKS_RPC_URL`` is unset.
"""

import os
from pathlib import Path

import pytest

from nodetasks import config as nodetasks_config

# pylint: disable=unused-argument

INTEGRATION_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark items below `tests/integration/`; skip them when no node is configured."""
    no_node = pytest.mark.skip(reason=f"{nodetasks_config.RPC_URL_ENV} is not set")
    has_node = bool(os.environ.get(nodetasks_config.RPC_URL_ENV))
    for item in items:
        if INTEGRATION_ROOT not in item.path.resolve().parents:
            continue
        if item.get_closest_marker("integration") is None:
            item.add_marker(pytest.mark.integration)
        if not has_node:
            item.add_marker(no_node)
