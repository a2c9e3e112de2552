"""Ledger client backed by a JSON-RPC node through `web3.AsyncWeb3`.

Singleton contracts are resolved the way Truffle's `Contract.deployed()`
does it: the address recorded for the current network id in the build
artifact, confirmed by the presence of code at that address.

Library exceptions are translated into the `nodetasks` ledger errors:

- `ContractLogicError` or a receipt with `status == 0` → `TransactionRevertedError`
  (`DeploymentError` while deploying)
- `aiohttp.ClientError`, `asyncio.TimeoutError`, `TimeExhausted` → `NetworkError`
- any other node RPC error → `TransactionRejectedError` (`DeploymentError`
  while deploying)
- arguments web3 cannot encode → `TransactionRevertedError` (`DeploymentError`
  while deploying), matching the in-memory ledger

Timeouts stay `NetworkError` during deployment too; whether the contract was
created is unknown at that point.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from pathlib import Path
from typing import Any

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import (
    ContractLogicError,
    TimeExhausted,
    Web3RPCError,
    Web3ValidationError,
)

from nodetasks import config
from nodetasks.adapters.ledger.artifacts import ArtifactStore
from nodetasks.interfaces.ledger import (
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

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, TimeExhausted)
# raised while encoding arguments, before anything reaches the node
ARGUMENT_ERRORS = (Web3ValidationError, TypeError, ValueError)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _tx_params(
    tx: TxConfig, error: type[DeploymentError | TransactionRejectedError], subject: str
) -> dict[str, Any]:
    """`tx.as_params()` with the sender checksummed, as web3 requires."""
    try:
        sender = Web3.to_checksum_address(tx.sender)
    except (TypeError, ValueError) as exc:
        raise error(subject, f"invalid sender {tx.sender!r}") from exc
    return {**tx.as_params(), "from": sender}


class Web3ContractHandle(ContractHandle):
    """Handle wrapping a `web3` contract instance."""

    def __init__(self, ledger: Web3Ledger, contract_name: str, contract: Any):
        self._ledger = ledger
        self._contract_name = contract_name
        self._contract = contract

    @property
    def address(self) -> Address:
        return self._contract.address

    @property
    def contract_name(self) -> str:
        return self._contract_name

    async def invoke(self, method: str, *args: Any, tx: TxConfig) -> TxReceipt:
        params = _tx_params(tx, TransactionRejectedError, method)
        logger.debug("Sending %s.%s%r from %s", self._contract_name, method, args, tx.sender)
        try:
            function = getattr(self._contract.functions, method)(*args)
            receipt = await self._ledger.mine(function.transact(params))
        except ContractLogicError as exc:
            raise TransactionRevertedError(method, _describe(exc)) from exc
        except TRANSPORT_ERRORS as exc:
            raise NetworkError(_describe(exc)) from exc
        except Web3RPCError as exc:
            raise TransactionRejectedError(method, _describe(exc)) from exc
        except ARGUMENT_ERRORS as exc:
            raise TransactionRevertedError(method, _describe(exc)) from exc
        if receipt.status == 0:
            raise TransactionRevertedError(method, "transaction status 0")
        return receipt

    async def call(self, method: str, *args: Any) -> Any:
        try:
            function = getattr(self._contract.functions, method)(*args)
            return await function.call()
        except ContractLogicError as exc:
            raise TransactionRevertedError(method, _describe(exc)) from exc
        except TRANSPORT_ERRORS as exc:
            raise NetworkError(_describe(exc)) from exc
        except Web3RPCError as exc:
            raise TransactionRejectedError(method, _describe(exc)) from exc
        except ARGUMENT_ERRORS as exc:
            raise TransactionRevertedError(method, _describe(exc)) from exc


class Web3Ledger(LedgerClient):
    """`LedgerClient` talking to a node over JSON-RPC."""

    def __init__(
        self,
        w3: AsyncWeb3,
        artifacts: ArtifactStore,
        *,
        receipt_timeout: float = config.DEFAULT_RECEIPT_TIMEOUT,
        network_id: str | None = None,
    ):
        self._w3 = w3
        self._artifacts = artifacts
        self.receipt_timeout = receipt_timeout
        self._network_id = network_id  # looked up on first use when None

    @classmethod
    def from_url(
        cls,
        url: str,
        artifacts_dir: Path,
        *,
        receipt_timeout: float = config.DEFAULT_RECEIPT_TIMEOUT,
        request_timeout: float = 30.0,
    ) -> Web3Ledger:
        """Build a client for the node at ``url`` using artifacts from ``artifacts_dir``."""
        provider = AsyncHTTPProvider(
            url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout)}
        )
        return cls(
            AsyncWeb3(provider),
            ArtifactStore(artifacts_dir),
            receipt_timeout=receipt_timeout,
        )

    async def network_id(self) -> str:
        """Network id reported by the node (cached after the first lookup)."""
        if self._network_id is None:
            try:
                self._network_id = str(await self._w3.net.version)
            except TRANSPORT_ERRORS as exc:
                raise NetworkError(_describe(exc)) from exc
        return self._network_id

    async def accounts(self) -> list[Address]:
        try:
            return list(await self._w3.eth.accounts)
        except TRANSPORT_ERRORS as exc:
            raise NetworkError(_describe(exc)) from exc

    async def aclose(self) -> None:
        await self._w3.provider.disconnect()

    async def deployed(self, contract_name: str) -> ContractHandle:
        artifact = self._artifacts.load(contract_name)
        network_id = await self.network_id()
        address = Web3.to_checksum_address(artifact.address_on(network_id))
        try:
            code = await self._w3.eth.get_code(address)
        except TRANSPORT_ERRORS as exc:
            raise NetworkError(_describe(exc)) from exc
        if not code:
            raise ContractNotDeployedError(contract_name, network_id)
        contract = self._w3.eth.contract(address=address, abi=artifact.abi)
        return Web3ContractHandle(self, contract_name, contract)

    async def deploy(
        self, contract_name: str, args: Sequence[Any], tx: TxConfig
    ) -> ContractHandle:
        artifact = self._artifacts.load(contract_name)
        factory = self._w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        params = _tx_params(tx, DeploymentError, contract_name)
        logger.debug("Deploying %s%r from %s", contract_name, tuple(args), tx.sender)
        try:
            receipt = await self.mine(factory.constructor(*args).transact(params))
        except TRANSPORT_ERRORS as exc:
            raise NetworkError(_describe(exc)) from exc
        except (ContractLogicError, Web3RPCError, *ARGUMENT_ERRORS) as exc:
            raise DeploymentError(contract_name, _describe(exc)) from exc
        if receipt.status == 0 or not receipt.contract_address:
            raise DeploymentError(contract_name, "constructor reverted")
        contract = self._w3.eth.contract(address=receipt.contract_address, abi=artifact.abi)
        logger.debug("Deployed %s at %s", contract_name, receipt.contract_address)
        return Web3ContractHandle(self, contract_name, contract)

    async def mine(self, send: Awaitable[Any]) -> TxReceipt:
        """Await a transaction submission, then wait for its receipt."""
        tx_hash = await send
        receipt = await self._w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )
        return TxReceipt(
            transaction_hash=Web3.to_hex(receipt["transactionHash"]),
            status=receipt["status"],
            gas_used=receipt["gasUsed"],
            contract_address=receipt.get("contractAddress"),
        )
