"""Unit tests for the composition root."""

from pathlib import Path

import pytest

from nodetasks import config
from nodetasks.adapters.ledger import InMemoryLedger, Web3Ledger
from nodetasks.bootstrap import bootstrap, build_ledger

pytestmark = pytest.mark.asyncio


async def test_memory_backend_is_bootstrapped():
    """The memory backend comes with storage and registry deployed."""
    ledger = await build_ledger("memory")
    assert isinstance(ledger, InMemoryLedger)
    assert (await ledger.deployed(config.REGISTRY_CONTRACT)).address


async def test_web3_backend_reads_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
):
    """The web3 backend is built from the RPC URL and receipt timeout variables."""
    monkeypatch.setenv(config.RPC_URL_ENV, "http://127.0.0.1:8545")
    monkeypatch.setenv(config.ARTIFACTS_DIR_ENV, str(tmp_path))
    monkeypatch.setenv(config.RECEIPT_TIMEOUT_ENV, "7")

    ledger = await build_ledger("web3")

    assert isinstance(ledger, Web3Ledger)
    assert ledger.receipt_timeout == 7.0


async def test_web3_backend_requires_url(monkeypatch: pytest.MonkeyPatch):
    """Without NODETASKS_RPC_URL the web3 backend cannot be built."""
    monkeypatch.delenv(config.RPC_URL_ENV, raising=False)
    with pytest.raises(config.RpcUrlNotSetError):
        await build_ledger("web3")


async def test_unknown_backend():
    """Only memory and web3 are supported."""
    with pytest.raises(ValueError, match="unknown ledger backend"):
        await build_ledger("ganache")


async def test_container_carries_gas_policy(monkeypatch: pytest.MonkeyPatch):
    """bootstrap() pairs the ledger with the environment's gas policy."""
    monkeypatch.setenv("NODETASKS_REGISTRY_GAS_LIMIT", "300000")

    container = await bootstrap()

    assert container.backend == "memory"
    assert container.gas.registry.gas_limit == 300_000
