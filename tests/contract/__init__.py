"""Contract tests.

Purpose
- Define registry behavior once and run it against every ledger backend,
  so the in-memory simulation and a real node stay interchangeable.

Guidelines
- Take the ledger from the ``ledger`` fixture; never build one directly.
- Assert only through the fixture operations and registry reads.
"""
