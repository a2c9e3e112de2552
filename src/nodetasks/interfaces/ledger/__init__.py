"""Ledger Interface Package"""

from .errors import (
    ArtifactNotFoundError,
    ContractNotDeployedError,
    DeploymentError,
    LedgerError,
    NetworkError,
    TransactionRejectedError,
    TransactionRevertedError,
)
from .ledger import (
    ZERO_ADDRESS,
    Address,
    ContractHandle,
    LedgerClient,
    TxConfig,
    TxReceipt,
)

__all__ = [
    "Address",
    "ArtifactNotFoundError",
    "ContractHandle",
    "ContractNotDeployedError",
    "DeploymentError",
    "LedgerClient",
    "LedgerError",
    "NetworkError",
    "TransactionRejectedError",
    "TransactionRevertedError",
    "TxConfig",
    "TxReceipt",
    "ZERO_ADDRESS",
]
