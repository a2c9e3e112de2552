"""Assemble a ledger client and gas policy from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from nodetasks import config
from nodetasks.adapters.ledger import InMemoryLedger, Web3Ledger
from nodetasks.config import GasPolicy
from nodetasks.interfaces.ledger import LedgerClient

BACKENDS = ("memory", "web3")


@dataclass(frozen=True)
class LedgerContainer:
    """Wiring handed to test code: the ledger client and the gas policy."""

    backend: str
    ledger: LedgerClient
    gas: GasPolicy


def build_web3_ledger(
    url: str | None = None, artifacts_dir: Path | None = None
) -> Web3Ledger:
    """Build a web3 client, falling back to the environment for unset arguments."""
    return Web3Ledger.from_url(
        url or config.get_rpc_url(),
        artifacts_dir or config.get_artifacts_dir(),
        receipt_timeout=config.get_receipt_timeout(),
    )


async def build_ledger(backend: str = "memory") -> LedgerClient:
    """Build a ledger client for ``backend`` ("memory" or "web3")."""
    match backend:
        case "memory":
            return await InMemoryLedger.bootstrap()
        case "web3":
            return build_web3_ledger()
        case _:
            raise ValueError(f"unknown ledger backend: {backend}")


async def bootstrap(backend: str = "memory") -> LedgerContainer:
    """Build the ledger client and read the gas policy."""
    return LedgerContainer(
        backend=backend,
        ledger=await build_ledger(backend),
        gas=config.get_gas_policy(),
    )
