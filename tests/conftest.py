"""Shared pytest fixtures."""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from fastapi.testclient import TestClient

from walletauth.app import App
from walletauth.config import Config
from walletauth.web.server import create_fastapi_app


def _sign(account: LocalAccount, message: str) -> str:
    signed = account.sign_message(encode_defunct(text=message))
    return "0x" + bytes(signed.signature).hex()


class FakeClock:
    """Manually advanced clock for both datetime and monotonic consumers."""

    def __init__(self) -> None:
        self.start = datetime(2025, 1, 1, tzinfo=UTC)
        self.elapsed = 0.0

    def advance(self, seconds: float) -> None:
        self.elapsed += seconds

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.elapsed)

    def monotonic(self) -> float:
        return self.elapsed


@pytest.fixture
def sign():
    """Sign a personal message with an account and return the 0x-prefixed signature."""
    return _sign


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return Config(_env_file=None)


@pytest.fixture
def wallet():
    """A random wallet for signing."""
    return Account.create()


@pytest.fixture
def other_wallet():
    return Account.create()


@pytest.fixture
def app_instance(config):
    return App(config)


@pytest.fixture
def client(app_instance, config) -> Iterator[TestClient]:
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        yield test_client
