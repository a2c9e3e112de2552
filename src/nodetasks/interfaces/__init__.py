"""Interfaces (application boundary) for nodetasks.

Defines framework-free contracts: ABCs and small DTOs shared by the fixture
operations and the ledger adapters. No network or library code lives here.

Dependency rule: this package is independent; do not import from any other
`nodetasks.*` modules. It may be imported by `nodetasks.node_tasks`,
`nodetasks.adapters`, and `nodetasks.bootstrap`.
"""
