"""Integration tests.

Purpose
- Exercise a real node over JSON-RPC with migrated contracts.

Guidelines
- Skip cleanly when NODETASKS_RPC_URL is unset.
- Deploy fresh task contracts per test; never rely on registry contents left by others.
"""
