"""Ledger client adapters.

`InMemoryLedger` simulates the contracts in process and suits unit and
contract tests. `Web3Ledger` talks to a real node (Ganache, Hardhat, Anvil,
Geth dev mode) over JSON-RPC.
"""

from .artifacts import ArtifactStore, ContractArtifact
from .memory import InMemoryContractHandle, InMemoryLedger, SimulatedContract
from .web3_ledger import Web3ContractHandle, Web3Ledger

__all__ = [
    "ArtifactStore",
    "ContractArtifact",
    "InMemoryContractHandle",
    "InMemoryLedger",
    "SimulatedContract",
    "Web3ContractHandle",
    "Web3Ledger",
]
