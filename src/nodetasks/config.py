"""Configuration utilities for nodetasks.

This module centralizes the environment lookups, contract names, and gas
defaults used by the fixture operations and the ledger adapters.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from nodetasks.interfaces.ledger import Address, TxConfig

STORAGE_CONTRACT = "RocketStorage"  # pragma: no mutate
REGISTRY_CONTRACT = "RocketNodeTasks"  # pragma: no mutate
TEST_TASK_CONTRACT = "TestNodeTask"  # pragma: no mutate

DEFAULT_ARTIFACTS_DIR = Path("build") / "contracts"
DEFAULT_RECEIPT_TIMEOUT = 120.0

RPC_URL_ENV = "NODETASKS_RPC_URL"
ARTIFACTS_DIR_ENV = "NODETASKS_ARTIFACTS_DIR"
RECEIPT_TIMEOUT_ENV = "NODETASKS_RECEIPT_TIMEOUT"


class RpcUrlNotSetError(Exception):
    """Raised when the NODETASKS_RPC_URL environment variable is not set."""


class InvalidGasSettingError(ValueError):
    """Raised when a gas environment variable is not a positive integer.

    Attributes:
        name (str): The environment variable name.
        value (str): The rejected value.
    """

    def __init__(self, name: str, value: str):
        super().__init__(f"{name} must be a positive integer, got '{value}'.")
        self.name = name
        self.value = value


@dataclass(frozen=True)
class GasSettings:
    """Gas limit and price applied to one kind of transaction."""

    gas_limit: int
    gas_price: int | None = None

    def for_sender(self, sender: Address) -> TxConfig:
        """Build the transaction parameters for ``sender``."""
        return TxConfig(sender=sender, gas_limit=self.gas_limit, gas_price=self.gas_price)


@dataclass(frozen=True)
class GasPolicy:
    """Gas settings for deployments and registry calls."""

    deploy: GasSettings = GasSettings(gas_limit=5_000_000, gas_price=10_000_000_000)
    registry: GasSettings = GasSettings(gas_limit=500_000)


DEFAULT_GAS_POLICY = GasPolicy()


def get_rpc_url() -> str:
    """Get the JSON-RPC endpoint from the environment.

    Returns:
        The value of the `NODETASKS_RPC_URL` environment variable.

    Raises:
        RpcUrlNotSetError: If `NODETASKS_RPC_URL` is not set.
    """
    if not (url := os.environ.get(RPC_URL_ENV)):
        raise RpcUrlNotSetError
    return url


def get_artifacts_dir() -> Path:
    """Directory holding the Truffle build artifacts (`<Name>.json`)."""
    if value := os.environ.get(ARTIFACTS_DIR_ENV):
        return Path(value)
    return DEFAULT_ARTIFACTS_DIR


def get_receipt_timeout() -> float:
    """Seconds to wait for a transaction receipt."""
    if not (value := os.environ.get(RECEIPT_TIMEOUT_ENV)):
        return DEFAULT_RECEIPT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ValueError(f"{RECEIPT_TIMEOUT_ENV} must be a number, got '{value}'.") from exc
    if timeout <= 0:
        raise ValueError(f"{RECEIPT_TIMEOUT_ENV} must be positive, got '{value}'.")
    return timeout


def _positive_int(name: str, default: int | None) -> int | None:
    if not (value := os.environ.get(name)):
        return default
    try:
        number = int(value)
    except ValueError as exc:
        raise InvalidGasSettingError(name, value) from exc
    if number <= 0:
        raise InvalidGasSettingError(name, value)
    return number


def get_gas_policy() -> GasPolicy:
    """Build the gas policy, letting environment variables override the defaults.

    Recognized variables:
    - `NODETASKS_DEPLOY_GAS_LIMIT` / `NODETASKS_DEPLOY_GAS_PRICE`
    - `NODETASKS_REGISTRY_GAS_LIMIT` / `NODETASKS_REGISTRY_GAS_PRICE`

    Raises:
        InvalidGasSettingError: If a variable is set to a non-positive or
            non-integer value.
    """
    deploy = DEFAULT_GAS_POLICY.deploy
    registry = DEFAULT_GAS_POLICY.registry
    return GasPolicy(
        deploy=GasSettings(
            gas_limit=_positive_int("NODETASKS_DEPLOY_GAS_LIMIT", deploy.gas_limit),
            gas_price=_positive_int("NODETASKS_DEPLOY_GAS_PRICE", deploy.gas_price),
        ),
        registry=GasSettings(
            gas_limit=_positive_int("NODETASKS_REGISTRY_GAS_LIMIT", registry.gas_limit),
            gas_price=_positive_int("NODETASKS_REGISTRY_GAS_PRICE", registry.gas_price),
        ),
    )
