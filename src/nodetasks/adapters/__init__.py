"""Adapters (infrastructure) for nodetasks.

Provide concrete implementations of the interface ports: ledger clients for
a JSON-RPC node and for an in-memory simulation, plus build-artifact loading.

Dependency rule: may import `nodetasks.interfaces` and `nodetasks.config`;
the interfaces must not import this package.
"""
