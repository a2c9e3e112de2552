"""pytest plugin exposing ledger fixtures for node-task tests.

Enable it from a `conftest.py`:

    pytest_plugins = ["nodetasks.pytest_plugin"]

The plugin needs pytest and pytest-asyncio, which ship with the ``test``
extra: install ``nodetasks[test]``.

Options:
- ``--ledger {memory,web3}`` (env ``NODETASKS_LEDGER``, default ``memory``)
- ``--nodetasks-log-level LEVEL`` attaches a Rich console handler to the
  ``nodetasks`` logger
- ``--nodetasks-log-path PATH`` enables the flight recorder

Fixtures: ``ledger``, ``accounts``, ``owner``, ``gas_policy``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from nodetasks import __version__
from nodetasks import config as nodetasks_config
from nodetasks.bootstrap import BACKENDS, build_ledger
from nodetasks.config import GasPolicy
from nodetasks.interfaces.ledger import Address, LedgerClient
from nodetasks.logging import (
    PROJECT_PREFIX,
    apply_library_levels,
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

LEDGER_ENV = "NODETASKS_LEDGER"

HANDLERS_KEY = pytest.StashKey[list[logging.Handler]]()

logger = logging.getLogger(__name__)

# pylint: disable=redefined-outer-name


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("nodetasks")
    group.addoption(
        "--ledger",
        choices=BACKENDS,
        default=os.environ.get(LEDGER_ENV, "memory"),
        help=f"Ledger backend for node-task fixtures (env {LEDGER_ENV}).",
    )
    group.addoption(
        "--nodetasks-log-level",
        default=None,
        help="Console log level for nodetasks loggers (e.g. DEBUG, INFO).",
    )
    group.addoption(
        "--nodetasks-log-path",
        type=Path,
        default=None,
        help="Write a DEBUG flight recorder of nodetasks logs to this file.",
    )


def pytest_configure(config: pytest.Config) -> None:
    level_name = config.getoption("--nodetasks-log-level")
    log_path = config.getoption("--nodetasks-log-path")
    if level_name is None and log_path is None:
        return

    project_logger = logging.getLogger(PROJECT_PREFIX)
    level = logging.getLevelName(level_name.upper()) if level_name else logging.WARNING
    if not isinstance(level, int):
        raise pytest.UsageError(f"unknown log level: {level_name}")

    handlers: list[logging.Handler] = [config_console_handler(level=level)]
    if log_path is not None:
        handlers.append(config_flight_recorder(log_path, flush_on_close=True))
    for handler in handlers:
        project_logger.addHandler(handler)
    config.stash[HANDLERS_KEY] = handlers
    project_logger.setLevel(logging.DEBUG if log_path is not None else level)
    apply_library_levels()

    log_startup(
        logger,
        app_version=__version__,
        backend=config.getoption("--ledger"),
        level=level,
        handlers=handlers,
        log_path=log_path,
    )


def pytest_unconfigure(config: pytest.Config) -> None:
    if not (handlers := config.stash.get(HANDLERS_KEY, [])):
        return
    project_logger = logging.getLogger(PROJECT_PREFIX)
    for handler in handlers:
        project_logger.removeHandler(handler)
        target = getattr(handler, "target", None)
        handler.close()  # flight recorder flushes here
        if target is not None:
            target.close()
    project_logger.setLevel(logging.NOTSET)


@pytest_asyncio.fixture
async def ledger(request: pytest.FixtureRequest) -> AsyncIterator[LedgerClient]:
    """Ledger client for the backend selected with ``--ledger``.

    The in-memory backend is rebuilt for every test; the web3 backend talks
    to whatever node ``NODETASKS_RPC_URL`` points at. The client is closed
    after the test.
    """
    backend = request.config.getoption("--ledger")
    if backend == "web3" and not os.environ.get(nodetasks_config.RPC_URL_ENV):
        pytest.skip(f"{nodetasks_config.RPC_URL_ENV} is not set")
    client = await build_ledger(backend)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def accounts(ledger: LedgerClient) -> list[Address]:
    """Sender identities known to the ledger."""
    return await ledger.accounts()


@pytest.fixture
def owner(accounts: list[Address]) -> Address:
    """The account that deployed (and owns) the registry."""
    return accounts[0]


@pytest.fixture
def gas_policy() -> GasPolicy:
    """Gas policy read from the environment."""
    return nodetasks_config.get_gas_policy()
