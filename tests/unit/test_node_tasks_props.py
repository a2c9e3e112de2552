"""Hypothesis property tests for the node-task fixture on the in-memory ledger.

- **Fresh addresses**: every deployment, whatever the name and sender,
  returns a contract address not seen before and not yet registered.
- **Add/remove symmetry**: adding then removing any subset of deployed tasks
  leaves the registry holding exactly the ones not removed.

Each example builds its own ledger and runs on its own event loop.
"""

from __future__ import annotations

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nodetasks.adapters.ledger import InMemoryLedger
from nodetasks.node_tasks import (
    add_node_task,
    create_test_node_task_contract,
    get_node_task_addresses,
    remove_node_task,
)

pytestmark = [pytest.mark.property]

# Keep small for CI, can be larger locally.
_PROPSET = settings(max_examples=40, deadline=None)

names = st.text(min_size=0, max_size=32)


@_PROPSET
@given(
    deployments=st.lists(
        st.tuples(names, st.integers(min_value=0, max_value=9)), min_size=1, max_size=8
    )
)
def test_deployments_return_unused_addresses(deployments: list[tuple[str, int]]):
    """No two deployments share an address, and none collides with a singleton."""

    async def scenario() -> None:
        ledger = await InMemoryLedger.bootstrap()
        accounts = await ledger.accounts()
        seen = {
            (await ledger.deployed("RocketStorage")).address,
            (await ledger.deployed("RocketNodeTasks")).address,
        }
        for name, sender in deployments:
            task = await create_test_node_task_contract(
                ledger, name=name, owner=accounts[sender]
            )
            assert task.address not in seen
            assert ledger.is_contract(task.address)
            seen.add(task.address)
        assert await get_node_task_addresses(ledger) == []

    asyncio.run(scenario())


@_PROPSET
@given(
    count=st.integers(min_value=1, max_value=6),
    data=st.data(),
)
def test_add_then_remove_leaves_the_rest(count: int, data: st.DataObject):
    """Removing a subset of added tasks leaves exactly the others, in order."""
    removed = data.draw(st.sets(st.integers(min_value=0, max_value=count - 1)))

    async def scenario() -> None:
        ledger = await InMemoryLedger.bootstrap()
        owner = (await ledger.accounts())[0]
        tasks = [
            (await create_test_node_task_contract(ledger, name=f"t{i}", owner=owner)).address
            for i in range(count)
        ]
        for task in tasks:
            await add_node_task(ledger, task_address=task, owner=owner)
        for index in sorted(removed):
            await remove_node_task(ledger, task_address=tasks[index], owner=owner)

        expected = [task for i, task in enumerate(tasks) if i not in removed]
        assert await get_node_task_addresses(ledger) == expected

    asyncio.run(scenario())
