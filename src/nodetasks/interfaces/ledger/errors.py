"""Exceptions for ledger operations.

Every failure raised by a ledger client derives from `LedgerError` so test
code can assert on a specific subclass or catch the whole family.
"""

from pathlib import Path


class LedgerError(Exception):
    """Base class for ledger errors."""


class DeploymentError(LedgerError):
    """Contract construction failed or was rejected by the network.

    Attributes:
        contract_name (str): Name of the contract being deployed.
        reason (str): Reason reported by the node or the adapter.
    """

    def __init__(self, contract_name: str, reason: str):
        super().__init__(f"Deployment of '{contract_name}' failed: {reason}")
        self.contract_name = contract_name
        self.reason = reason


class TransactionRevertedError(LedgerError):
    """A contract method call reverted.

    Attributes:
        method (str): Contract method that was invoked.
        reason (str): Revert reason, if the node reported one.
    """

    def __init__(self, method: str, reason: str):
        super().__init__(f"Transaction '{method}' reverted: {reason}")
        self.method = method
        self.reason = reason


class TransactionRejectedError(LedgerError):
    """The node refused to accept a transaction (unknown sender, insufficient funds).

    Attributes:
        method (str): Contract method that was invoked.
        reason (str): Reason reported by the node.
    """

    def __init__(self, method: str, reason: str):
        super().__init__(f"Transaction '{method}' rejected: {reason}")
        self.method = method
        self.reason = reason


class NetworkError(LedgerError):
    """Transport-level failure (timeout, connection loss) while talking to the network.

    Attributes:
        reason (str): Description of the transport failure.
    """

    def __init__(self, reason: str):
        super().__init__(f"Network error: {reason}")
        self.reason = reason


class ContractNotDeployedError(LedgerError):
    """A singleton contract has no deployed instance on the current network.

    Attributes:
        contract_name (str): Name of the contract that was looked up.
        network_id (str): Identifier of the network that was searched.
    """

    def __init__(self, contract_name: str, network_id: str):
        super().__init__(
            f"Contract '{contract_name}' is not deployed on network '{network_id}'."
        )
        self.contract_name = contract_name
        self.network_id = network_id


class ArtifactNotFoundError(LedgerError):
    """No build artifact exists for a contract.

    Attributes:
        contract_name (str): Name of the missing contract artifact.
        directory (Path): Directory that was searched.
    """

    def __init__(self, contract_name: str, directory: Path):
        super().__init__(
            f"No build artifact for contract '{contract_name}' in '{directory}'."
        )
        self.contract_name = contract_name
        self.directory = directory
