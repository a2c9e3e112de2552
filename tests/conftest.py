"""Global pytest fixtures for nodetasks."""

pytest_plugins = [
    "pytester",
    "nodetasks.pytest_plugin",
    "tests.fixtures.ledger",
]
