"""Node-task registry fixture operations.

Each operation looks up a singleton contract through the injected
`LedgerClient`, sends one transaction with the configured gas settings, and
waits for it to be mined. Failures are not caught here: `DeploymentError`,
`TransactionRevertedError`, `TransactionRejectedError`, and `NetworkError`
reach the calling test unchanged.
"""

from __future__ import annotations

import logging

from nodetasks import config
from nodetasks.config import GasPolicy
from nodetasks.interfaces.ledger import Address, ContractHandle, LedgerClient

logger = logging.getLogger(__name__)


async def create_test_node_task_contract(
    ledger: LedgerClient,
    *,
    name: str,
    owner: Address,
    gas: GasPolicy | None = None,
) -> ContractHandle:
    """Deploy a `TestNodeTask` wired to the deployed storage contract.

    Args:
        ledger: Ledger client to deploy through.
        name: Task name passed to the constructor.
        owner: Funded sender paying for the deployment.
        gas: Gas policy; defaults to `config.get_gas_policy()`.

    Returns:
        ContractHandle: Handle to the new task contract.

    Raises:
        DeploymentError: If the network rejected or reverted the deployment.
        NetworkError: On transport failure.
    """
    gas = gas or config.get_gas_policy()
    storage = await ledger.deployed(config.STORAGE_CONTRACT)
    task = await ledger.deploy(
        config.TEST_TASK_CONTRACT,
        [storage.address, name],
        gas.deploy.for_sender(owner),
    )
    logger.info("Created test node task %r at %s", name, task.address)
    return task


async def add_node_task(
    ledger: LedgerClient,
    *,
    task_address: Address,
    owner: Address,
    gas: GasPolicy | None = None,
) -> None:
    """Register ``task_address`` with the node-task registry."""
    gas = gas or config.get_gas_policy()
    registry = await ledger.deployed(config.REGISTRY_CONTRACT)
    await registry.invoke("add", task_address, tx=gas.registry.for_sender(owner))
    logger.info("Added node task %s", task_address)


async def remove_node_task(
    ledger: LedgerClient,
    *,
    task_address: Address,
    owner: Address,
    gas: GasPolicy | None = None,
) -> None:
    """Unregister ``task_address`` from the node-task registry."""
    gas = gas or config.get_gas_policy()
    registry = await ledger.deployed(config.REGISTRY_CONTRACT)
    await registry.invoke("remove", task_address, tx=gas.registry.for_sender(owner))
    logger.info("Removed node task %s", task_address)


async def update_node_task(
    ledger: LedgerClient,
    *,
    old_address: Address,
    new_address: Address,
    owner: Address,
    gas: GasPolicy | None = None,
) -> None:
    """Replace ``old_address`` with ``new_address`` in the registry in one transaction."""
    gas = gas or config.get_gas_policy()
    registry = await ledger.deployed(config.REGISTRY_CONTRACT)
    await registry.invoke(
        "update", old_address, new_address, tx=gas.registry.for_sender(owner)
    )
    logger.info("Updated node task %s -> %s", old_address, new_address)


async def get_node_task_count(ledger: LedgerClient) -> int:
    """Number of task addresses currently registered."""
    registry = await ledger.deployed(config.REGISTRY_CONTRACT)
    return int(await registry.call("getTaskCount"))


async def get_node_task_addresses(ledger: LedgerClient) -> list[Address]:
    """All registered task addresses, in registry order."""
    registry = await ledger.deployed(config.REGISTRY_CONTRACT)
    count = int(await registry.call("getTaskCount"))
    return [await registry.call("getTaskAddress", index) for index in range(count)]
