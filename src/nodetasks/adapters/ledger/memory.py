"""In-memory simulated ledger.

This module provides a small, node-free ledger implementation meant for
**tests**, examples, and local development. Contracts are plain Python
objects keyed by address; there is no EVM and no persistence across process
restarts.

Exports
-------
- InMemoryLedger: Concrete `LedgerClient` holding accounts and contracts in RAM.
- InMemoryContractHandle: `ContractHandle` bound to a simulated contract.
- SimulatedContract: Base class for simulated contract types.

Key behaviors
-------------
- **Atomic transactions**: every transaction runs under one `asyncio.Lock`.
  Simulated methods check all preconditions before mutating, so a revert
  leaves contract state untouched.
- **Gas**: each simulated method has a fixed cost. A `gas_limit` below it
  reverts with "out of gas". The sender must hold `gas_limit * gas_price` and
  is charged `gas_used * gas_price`, reverted or not.
- **Addresses**: contract addresses derive from `(deployer, nonce)` the way
  CREATE does, and the nonce advances on every mined transaction, so each
  deployment lands on a fresh address.
- **Transport failure**: `go_offline()` makes every operation raise
  `NetworkError` until `go_online()` is called.

Simulated registry policy
-------------------------
The authoritative rules belong to the registry contract itself. The
simulation follows the obvious set semantics: only the registry owner may
mutate; `add` rejects the zero address and duplicates; `remove` rejects
unknown addresses; `update` rejects an unknown old address or an already
registered new one and replaces in place.

Typical usage
-------------
    ledger = await InMemoryLedger.bootstrap()
    owner = (await ledger.accounts())[0]
    registry = await ledger.deployed("RocketNodeTasks")
    await registry.invoke("add", task, tx=TxConfig(owner, 500_000))
"""

from __future__ import annotations

import asyncio
import dataclasses
import hashlib
import itertools
import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from web3 import Web3

from nodetasks import config
from nodetasks.interfaces.ledger import (
    ZERO_ADDRESS,
    Address,
    ContractHandle,
    ContractNotDeployedError,
    DeploymentError,
    LedgerClient,
    NetworkError,
    TransactionRejectedError,
    TransactionRevertedError,
    TxConfig,
    TxReceipt,
)

logger = logging.getLogger(__name__)

NETWORK_ID = "memory"
DEFAULT_ACCOUNT_COUNT = 10
DEFAULT_BALANCE = 100 * 10**18  # 100 ether
DEFAULT_GAS_PRICE = 1_000_000_000  # 1 gwei
BLOCK_GAS_LIMIT = 10_000_000


class _Revert(Exception):
    """Raised inside simulated contract code to abort the transaction."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class _Rejected(Exception):
    """Raised when a transaction is refused before execution."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def _derive_address(seed: str) -> Address:
    return Web3.to_checksum_address("0x" + hashlib.sha256(seed.encode()).hexdigest()[-40:])


def _as_address(value: Any) -> Address:
    try:
        return Web3.to_checksum_address(value)
    except (TypeError, ValueError) as exc:
        raise _Revert(f"invalid address {value!r}") from exc


# ============================================================================
#                           Simulated contracts
# ============================================================================


class SimulatedContract:
    """Base class for contracts living in an `InMemoryLedger`.

    Subclasses declare:
    - `contract_name`: artifact name the contract is deployed under.
    - `deploy_gas`: gas consumed by the constructor.
    - `transactions`: method name -> (python attribute, gas). Each attribute is
      called as ``attr(sender, *args)``.
    - `views`: method name -> python attribute, called as ``attr(*args)``.
    """

    contract_name: ClassVar[str]
    deploy_gas: ClassVar[int]
    transactions: ClassVar[dict[str, tuple[str, int]]] = {}
    views: ClassVar[dict[str, str]] = {}

    def __init__(self, ledger: InMemoryLedger, address: Address, deployer: Address):
        self.ledger = ledger
        self.address = address
        self.owner = deployer

    def construct(self, *args: Any) -> None:
        """Constructor body; raise `_Revert` to abort the deployment."""
        if args:
            raise _Revert(f"{self.contract_name} takes no constructor arguments")

    def get_owner(self) -> Address:
        return self.owner


class SimulatedStorage(SimulatedContract):
    """Key/value storage hub shared by the other contracts."""

    contract_name = config.STORAGE_CONTRACT
    deploy_gas = 1_200_000
    views = {"owner": "get_owner"}


class SimulatedNodeTaskRegistry(SimulatedContract):
    """Owner-managed, ordered set of node task contract addresses."""

    contract_name = config.REGISTRY_CONTRACT
    deploy_gas = 1_800_000
    transactions = {
        "add": ("add", 90_000),
        "remove": ("remove", 60_000),
        "update": ("update", 70_000),
    }
    views = {
        "owner": "get_owner",
        "getTaskCount": "get_task_count",
        "getTaskAddress": "get_task_address",
    }

    def construct(self, *args: Any) -> None:
        (storage_address,) = args
        storage_address = _as_address(storage_address)
        if not self.ledger.is_contract(storage_address):
            raise _Revert("storage address is not a contract")
        self.storage_address = storage_address
        self.tasks: list[Address] = []

    def _only_owner(self, sender: Address) -> None:
        if sender != self.owner:
            raise _Revert("caller is not the registry owner")

    def add(self, sender: Address, task_address: Any) -> None:
        self._only_owner(sender)
        task_address = _as_address(task_address)
        if task_address == ZERO_ADDRESS:
            raise _Revert("invalid task address")
        if task_address in self.tasks:
            raise _Revert("task is already registered")
        self.tasks.append(task_address)

    def remove(self, sender: Address, task_address: Any) -> None:
        self._only_owner(sender)
        task_address = _as_address(task_address)
        if task_address not in self.tasks:
            raise _Revert("task is not registered")
        self.tasks.remove(task_address)

    def update(self, sender: Address, old_address: Any, new_address: Any) -> None:
        self._only_owner(sender)
        old_address = _as_address(old_address)
        new_address = _as_address(new_address)
        if old_address not in self.tasks:
            raise _Revert("task is not registered")
        if new_address == ZERO_ADDRESS:
            raise _Revert("invalid task address")
        if new_address in self.tasks:
            raise _Revert("task is already registered")
        self.tasks[self.tasks.index(old_address)] = new_address

    def get_task_count(self) -> int:
        return len(self.tasks)

    def get_task_address(self, index: int) -> Address:
        if not 0 <= index < len(self.tasks):
            raise _Revert("task index out of range")
        return self.tasks[index]


class SimulatedTestNodeTask(SimulatedContract):
    """Named no-op task wired to the storage contract."""

    contract_name = config.TEST_TASK_CONTRACT
    deploy_gas = 450_000
    views = {"owner": "get_owner", "name": "get_name", "rocketStorage": "get_storage"}

    def construct(self, *args: Any) -> None:
        storage_address, name = args
        storage_address = _as_address(storage_address)
        if not self.ledger.is_contract(storage_address):
            raise _Revert("storage address is not a contract")
        self.storage_address = storage_address
        self.name = str(name)

    def get_name(self) -> str:
        return self.name

    def get_storage(self) -> Address:
        return self.storage_address


DEFAULT_CONTRACT_TYPES: tuple[type[SimulatedContract], ...] = (
    SimulatedStorage,
    SimulatedNodeTaskRegistry,
    SimulatedTestNodeTask,
)


# ============================================================================
#                                 Ledger
# ============================================================================


class InMemoryContractHandle(ContractHandle):
    """Handle to a contract held by an `InMemoryLedger`."""

    def __init__(self, ledger: InMemoryLedger, contract: SimulatedContract):
        self._ledger = ledger
        self._contract = contract

    @property
    def address(self) -> Address:
        return self._contract.address

    @property
    def contract_name(self) -> str:
        return self._contract.contract_name

    async def invoke(self, method: str, *args: Any, tx: TxConfig) -> TxReceipt:
        return await self._ledger.execute(self._contract, method, args, tx)

    async def call(self, method: str, *args: Any) -> Any:
        return await self._ledger.evaluate(self._contract, method, args)


class InMemoryLedger(LedgerClient):
    """Simulated ledger for single-process test runs."""

    network_id = NETWORK_ID

    def __init__(
        self,
        balances: Mapping[Address, int] | None = None,
        *,
        default_gas_price: int = DEFAULT_GAS_PRICE,
        contract_types: Sequence[type[SimulatedContract]] = DEFAULT_CONTRACT_TYPES,
    ):
        if balances is None:
            balances = {
                _derive_address(f"account:{i}"): DEFAULT_BALANCE
                for i in range(DEFAULT_ACCOUNT_COUNT)
            }
        self._balances: dict[Address, int] = {
            Web3.to_checksum_address(address): amount for address, amount in balances.items()
        }
        self._nonces: defaultdict[Address, int] = defaultdict(int)
        self._contracts: dict[Address, SimulatedContract] = {}
        self._singletons: dict[str, Address] = {}
        self._contract_types = {t.contract_name: t for t in contract_types}
        self._default_gas_price = default_gas_price
        self._tx_counter = itertools.count(1)
        self._lock = asyncio.Lock()
        self._online = True

    @classmethod
    async def bootstrap(cls, **kwargs: Any) -> InMemoryLedger:
        """Create a ledger with the storage and registry singletons deployed.

        Both contracts are deployed from the first account, which therefore
        owns the registry.
        """
        ledger = cls(**kwargs)
        owner = (await ledger.accounts())[0]
        tx = TxConfig(sender=owner, gas_limit=BLOCK_GAS_LIMIT)
        storage = await ledger.deploy(config.STORAGE_CONTRACT, [], tx)
        ledger.register_deployed(storage)
        registry = await ledger.deploy(config.REGISTRY_CONTRACT, [storage.address], tx)
        ledger.register_deployed(registry)
        logger.debug(
            "Bootstrapped in-memory ledger: storage=%s registry=%s owner=%s",
            storage.address,
            registry.address,
            owner,
        )
        return ledger

    # --- connectivity ---

    def go_offline(self) -> None:
        self._online = False

    def go_online(self) -> None:
        self._online = True

    def _ensure_online(self) -> None:
        if not self._online:
            raise NetworkError("in-memory ledger is offline")

    # --- inspection ---

    def balance_of(self, address: Address) -> int:
        return self._balances.get(Web3.to_checksum_address(address), 0)

    def is_contract(self, address: Address) -> bool:
        return address in self._contracts

    def register_deployed(self, handle: ContractHandle) -> None:
        """Mark ``handle`` as the singleton instance returned by `deployed()`."""
        self._singletons[handle.contract_name] = handle.address

    # --- LedgerClient ---

    async def accounts(self) -> list[Address]:
        self._ensure_online()
        return list(self._balances)

    async def deployed(self, contract_name: str) -> ContractHandle:
        self._ensure_online()
        if (address := self._singletons.get(contract_name)) is None:
            raise ContractNotDeployedError(contract_name, self.network_id)
        return InMemoryContractHandle(self, self._contracts[address])

    async def deploy(
        self, contract_name: str, args: Sequence[Any], tx: TxConfig
    ) -> ContractHandle:
        self._ensure_online()
        if (contract_type := self._contract_types.get(contract_name)) is None:
            raise DeploymentError(contract_name, "unknown contract type")
        async with self._lock:
            await asyncio.sleep(0)  # yield like a network round-trip
            try:
                tx = self._admit(tx)
            except _Rejected as exc:
                raise DeploymentError(contract_name, exc.reason) from exc
            nonce = self._nonces[tx.sender]
            self._nonces[tx.sender] += 1
            address = _derive_address(f"contract:{tx.sender}:{nonce}")
            gas_used = contract_type.deploy_gas
            try:
                if tx.gas_limit < gas_used:
                    raise _Revert("out of gas")
                contract = contract_type(self, address, tx.sender)
                try:
                    contract.construct(*args)
                except (TypeError, ValueError) as exc:
                    raise _Revert(f"bad constructor arguments: {exc}") from exc
            except _Revert as exc:
                self._charge(tx, min(tx.gas_limit, gas_used))
                logger.debug("Deployment of %s reverted: %s", contract_name, exc.reason)
                raise DeploymentError(contract_name, exc.reason) from exc
            self._charge(tx, gas_used)
            self._contracts[address] = contract
        logger.debug("Deployed %s at %s from %s", contract_name, address, tx.sender)
        return InMemoryContractHandle(self, contract)

    # --- execution ---

    async def execute(
        self,
        contract: SimulatedContract,
        method: str,
        args: Sequence[Any],
        tx: TxConfig,
    ) -> TxReceipt:
        """Run a state-changing method as a mined transaction."""
        self._ensure_online()
        if method not in contract.transactions:
            raise AttributeError(f"{contract.contract_name} has no method '{method}'")
        attr, gas_used = contract.transactions[method]
        async with self._lock:
            await asyncio.sleep(0)
            try:
                tx = self._admit(tx)
            except _Rejected as exc:
                raise TransactionRejectedError(method, exc.reason) from exc
            self._nonces[tx.sender] += 1
            tx_hash = f"0x{next(self._tx_counter):064x}"
            try:
                if tx.gas_limit < gas_used:
                    raise _Revert("out of gas")
                getattr(contract, attr)(tx.sender, *args)
            except _Revert as exc:
                self._charge(tx, min(tx.gas_limit, gas_used))
                logger.debug("%s.%s reverted: %s", contract.contract_name, method, exc.reason)
                raise TransactionRevertedError(method, exc.reason) from exc
            self._charge(tx, gas_used)
        return TxReceipt(transaction_hash=tx_hash, status=1, gas_used=gas_used)

    async def evaluate(
        self, contract: SimulatedContract, method: str, args: Sequence[Any]
    ) -> Any:
        """Evaluate a read-only method."""
        self._ensure_online()
        if method not in contract.views:
            raise AttributeError(f"{contract.contract_name} has no view '{method}'")
        await asyncio.sleep(0)
        try:
            return getattr(contract, contract.views[method])(*args)
        except _Revert as exc:
            raise TransactionRevertedError(method, exc.reason) from exc

    def _admit(self, tx: TxConfig) -> TxConfig:
        """Check ``tx`` can be mined; returns it with a checksummed sender."""
        try:
            tx = dataclasses.replace(tx, sender=Web3.to_checksum_address(tx.sender))
        except (TypeError, ValueError) as exc:
            raise _Rejected(f"invalid sender {tx.sender!r}") from exc
        if tx.sender not in self._balances:
            raise _Rejected(f"unknown sender {tx.sender}")
        if tx.gas_limit > BLOCK_GAS_LIMIT:
            raise _Rejected("gas limit exceeds block gas limit")
        if self._balances[tx.sender] < tx.gas_limit * self._gas_price(tx):
            raise _Rejected("insufficient funds for gas * price")
        return tx

    def _charge(self, tx: TxConfig, gas_used: int) -> None:
        self._balances[tx.sender] -= gas_used * self._gas_price(tx)

    def _gas_price(self, tx: TxConfig) -> int:
        return self._default_gas_price if tx.gas_price is None else tx.gas_price
