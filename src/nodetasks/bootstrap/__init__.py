"""Bootstrap (composition root) for nodetasks.

Builds a ready-to-use ledger client from configuration: a `Web3Ledger`
pointed at `NODETASKS_RPC_URL`, or an `InMemoryLedger` with the storage and
registry singletons already deployed.

Import rules:
- Entry points (the pytest plugin, consumer test suites) import *this*
  package rather than choosing adapters themselves.
- No fixture logic lives here; this is assembly only.
"""

from .bootstrap import BACKENDS, LedgerContainer, bootstrap, build_ledger

__all__ = ["BACKENDS", "LedgerContainer", "bootstrap", "build_ledger"]
