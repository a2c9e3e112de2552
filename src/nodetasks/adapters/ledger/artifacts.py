"""Truffle build-artifact loading.

A Truffle build writes one JSON file per contract (`build/contracts/<Name>.json`)
holding the ABI, the creation bytecode, and a `networks` map from network id
to the address the migrations deployed the contract at.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nodetasks.interfaces.ledger import (
    Address,
    ArtifactNotFoundError,
    ContractNotDeployedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """ABI, bytecode and deployed addresses of one contract."""

    contract_name: str
    abi: list[dict[str, Any]]
    bytecode: str
    networks: dict[str, Address] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ContractArtifact:
        """Build an artifact from a decoded Truffle JSON document."""
        networks = {
            str(network_id): entry["address"]
            for network_id, entry in data.get("networks", {}).items()
            if entry.get("address")
        }
        return cls(
            contract_name=data["contractName"],
            abi=data["abi"],
            bytecode=data.get("bytecode", "0x"),
            networks=networks,
        )

    def address_on(self, network_id: str) -> Address:
        """Address of the migrated instance on ``network_id``.

        Raises:
            ContractNotDeployedError: If the artifact has no entry for the network.
        """
        try:
            return self.networks[str(network_id)]
        except KeyError:
            raise ContractNotDeployedError(self.contract_name, str(network_id)) from None


class ArtifactStore:
    """Lazily loads and caches artifacts from a build directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._cache: dict[str, ContractArtifact] = {}

    def load(self, contract_name: str) -> ContractArtifact:
        """Return the artifact for ``contract_name``.

        Raises:
            ArtifactNotFoundError: If `<directory>/<contract_name>.json` does not exist.
        """
        if (artifact := self._cache.get(contract_name)) is not None:
            return artifact
        path = self.directory / f"{contract_name}.json"
        if not path.is_file():
            raise ArtifactNotFoundError(contract_name, self.directory)
        with path.open(encoding="utf-8") as fp:
            artifact = ContractArtifact.from_json(json.load(fp))
        logger.debug("Loaded artifact %s from %s", contract_name, path)
        self._cache[contract_name] = artifact
        return artifact
