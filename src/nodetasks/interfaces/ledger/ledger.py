"""Interfaces for talking to a contract ledger.

Defines the `LedgerClient` abstraction used by the node-task fixture to look
up singleton contracts and deploy new ones, and the `ContractHandle` used to
invoke or read methods on a deployed contract. Concrete clients live in
`nodetasks.adapters.ledger`.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

Address: TypeAlias = str  # 0x-prefixed, checksummed, 20 bytes

ZERO_ADDRESS: Address = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class TxConfig:
    """Transaction parameters for a single call. Built fresh, never stored."""

    sender: Address
    gas_limit: int
    gas_price: int | None = None  # None lets the node pick

    def as_params(self) -> dict[str, Any]:
        """Render the transaction dict understood by web3 (`from`, `gas`, `gasPrice`)."""
        params: dict[str, Any] = {"from": self.sender, "gas": self.gas_limit}
        if self.gas_price is not None:
            params["gasPrice"] = self.gas_price
        return params


@dataclass(frozen=True)
class TxReceipt:
    """Outcome of a mined transaction."""

    transaction_hash: str
    status: int  # 1 success, 0 reverted
    gas_used: int
    contract_address: Address | None = None  # set for deployments only


class ContractHandle(abc.ABC):
    """Client-side reference to a deployed contract."""

    @property
    @abc.abstractmethod
    def address(self) -> Address:
        """Address the contract is deployed at."""

    @property
    @abc.abstractmethod
    def contract_name(self) -> str:
        """Name of the contract (as in its build artifact)."""

    @abc.abstractmethod
    async def invoke(self, method: str, *args: Any, tx: TxConfig) -> TxReceipt:
        """Send a transaction calling ``method`` and wait until it is mined.

        Args:
            method: Contract method name.
            *args: Positional method arguments.
            tx: Sender and gas parameters.

        Returns:
            TxReceipt: Receipt of the successful transaction.

        Raises:
            TransactionRevertedError: If the call reverted.
            TransactionRejectedError: If the node refused the transaction.
            NetworkError: On transport failure.
        """

    @abc.abstractmethod
    async def call(self, method: str, *args: Any) -> Any:
        """Evaluate a read-only method without sending a transaction.

        Raises:
            TransactionRevertedError: If the call reverted.
            NetworkError: On transport failure.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.contract_name} at {self.address}>"


class LedgerClient(abc.ABC):
    """Access to deployed contracts and deployment of new ones."""

    @abc.abstractmethod
    async def deployed(self, contract_name: str) -> ContractHandle:
        """Return the singleton deployed instance of ``contract_name``.

        Raises:
            ContractNotDeployedError: If no instance exists on this network.
            NetworkError: On transport failure.
        """

    @abc.abstractmethod
    async def deploy(
        self, contract_name: str, args: Sequence[Any], tx: TxConfig
    ) -> ContractHandle:
        """Deploy a new instance of ``contract_name`` and wait for it to be mined.

        Args:
            contract_name: Name of the contract to construct.
            args: Constructor arguments.
            tx: Sender and gas parameters.

        Returns:
            ContractHandle: Handle to the new instance.

        Raises:
            DeploymentError: If the network rejected or reverted the deployment.
            NetworkError: On transport failure.
        """

    @abc.abstractmethod
    async def accounts(self) -> list[Address]:
        """Sender identities known to the node, first one being the default."""

    async def aclose(self) -> None:
        """Release connections held by the client. Safe to call more than once."""
