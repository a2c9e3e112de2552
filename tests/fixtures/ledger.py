"""Fixtures for building ledgers and task contracts."""

from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio

from nodetasks.adapters.ledger import InMemoryLedger
from nodetasks.interfaces.ledger import Address, ContractHandle, LedgerClient
from nodetasks.node_tasks import create_test_node_task_contract

# pylint: disable=redefined-outer-name


@pytest_asyncio.fixture
async def memory_ledger() -> InMemoryLedger:
    """Fresh in-memory ledger with storage and registry deployed."""
    return await InMemoryLedger.bootstrap()


@pytest.fixture
def outsider(accounts: list[Address]) -> Address:
    """A funded account that does not own the registry."""
    return accounts[1]


@pytest.fixture
def make_task(
    ledger: LedgerClient, owner: Address
) -> Callable[..., Awaitable[ContractHandle]]:
    """Factory fixture: deploy a `TestNodeTask` named ``name`` from ``owner``.

    Example:
        ```py
        task = await make_task("task1")
        ```
    """

    async def _make(name: str = "task", sender: Address | None = None) -> ContractHandle:
        return await create_test_node_task_contract(
            ledger, name=name, owner=sender or owner
        )

    return _make
