"""nodetasks test suite.

Folder taxonomy
- unit/         : Isolated checks of one module, on fakes, mocks or the in-memory ledger.
- contract/     : Registry behavior every ledger backend must honor (``--ledger``).
- integration/  : Runs against a live JSON-RPC node; skipped without NODETASKS_RPC_URL.
- fixtures/     : pytest fixtures loaded through ``pytest_plugins``.
- helpers/      : Shared utilities (no tests here).

Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
