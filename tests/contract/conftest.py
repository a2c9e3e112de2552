"""Marks for `tests/contract/`.

Contract tests state behavior every `LedgerClient` backend must honor. They
use the plugin's `ledger` fixture, so the same items run in memory by default
and against a node under ``--ledger web3``; ``-m contract`` selects them.
"""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

CONTRACT_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark items below `tests/contract/` as `contract` and note the backend."""
    backend = config.getoption("--ledger")
    for item in items:
        if CONTRACT_ROOT not in item.path.resolve().parents:
            continue
        if item.get_closest_marker("contract") is None:
            item.add_marker(pytest.mark.contract)
        item.user_properties.append(("ledger", backend))
