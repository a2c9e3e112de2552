"""nodetasks

Test-fixture helpers for deploying and driving a node-task registry
contract during automated test runs. Works against a real JSON-RPC node
through web3 or against an in-memory simulated ledger.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
