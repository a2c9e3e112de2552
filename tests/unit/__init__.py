"""Unit tests.

Purpose
- Verify a single module in isolation.

Guidelines
- No real network; use the fake ledger, mocked web3, or the in-memory ledger.
- Keep tests small, fast, and deterministic.
"""
