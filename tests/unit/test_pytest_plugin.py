"""Tests for the nodetasks pytest plugin, run in a throwaway pytest session."""

import pytest

from nodetasks import config

CONFTEST = 'pytest_plugins = ["nodetasks.pytest_plugin"]'

OWNER_TEST = """
import pytest

@pytest.mark.asyncio
async def test_owner_owns_registry(ledger, owner):
    registry = await ledger.deployed("RocketNodeTasks")
    assert await registry.call("owner") == owner
"""


def test_memory_fixtures(pytester: pytest.Pytester):
    """By default the fixtures run on a bootstrapped in-memory ledger."""
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(OWNER_TEST)

    result = pytester.runpytest("-p", "no:cacheprovider")

    result.assert_outcomes(passed=1)


def test_web3_without_url_skips(
    pytester: pytest.Pytester, monkeypatch: pytest.MonkeyPatch
):
    """Selecting web3 without NODETASKS_RPC_URL skips instead of failing."""
    monkeypatch.delenv(config.RPC_URL_ENV, raising=False)
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(OWNER_TEST)

    result = pytester.runpytest("-p", "no:cacheprovider", "--ledger", "web3")

    result.assert_outcomes(skipped=1)


def test_gas_policy_fixture(pytester: pytest.Pytester, monkeypatch: pytest.MonkeyPatch):
    """The gas_policy fixture reflects the environment."""
    monkeypatch.setenv("NODETASKS_DEPLOY_GAS_LIMIT", "4000000")
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(
        """
        def test_gas(gas_policy):
            assert gas_policy.deploy.gas_limit == 4_000_000
        """
    )

    result = pytester.runpytest("-p", "no:cacheprovider")

    result.assert_outcomes(passed=1)


def test_unknown_log_level_is_usage_error(pytester: pytest.Pytester):
    """A bad --nodetasks-log-level aborts the session."""
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile("def test_nothing(): pass")

    result = pytester.runpytest("-p", "no:cacheprovider", "--nodetasks-log-level", "LOUD")

    assert result.ret == pytest.ExitCode.USAGE_ERROR


def test_flight_recorder_written(pytester: pytest.Pytester):
    """--nodetasks-log-path records the session's nodetasks logs to a file."""
    log_path = pytester.path / "nodetasks.log"
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(OWNER_TEST)

    result = pytester.runpytest(
        "-p", "no:cacheprovider", "--nodetasks-log-path", str(log_path)
    )

    result.assert_outcomes(passed=1)
    assert "ledger=memory" in log_path.read_text(encoding="utf-8")
