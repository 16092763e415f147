"""Pytest configuration and fixtures."""

import json
import os
from typing import Callable

import pytest
from solders.keypair import Keypair

# Keep the developer's environment out of the tests
for _var in (
    "HMAC_SECRET",
    "TRADER_SECRET_BASE58",
    "TRADER_SECRET_JSON",
    "PRIORITIZATION_FEE_LAMPORTS",
    "SERIALIZE_SIGNING",
):
    os.environ.pop(_var, None)
os.environ["DEBUG"] = "true"

from swaprelay.auth import compute_request_signature
from swaprelay.config import Settings
from swaprelay.utils.locks import clear_signing_locks

from helpers import TEST_SECRET, StubAggregator, StubBroadcaster, build_unsigned_transaction


@pytest.fixture(autouse=True)
def reset_locks():
    """Clear signing locks before each test."""
    clear_signing_locks()


@pytest.fixture
def keypair() -> Keypair:
    """Ephemeral relay signing key."""
    return Keypair()


@pytest.fixture
def settings() -> Settings:
    """Settings with a known HMAC secret and no .env file."""
    return Settings(_env_file=None, hmac_secret=TEST_SECRET)


@pytest.fixture
def unsigned_tx(keypair) -> str:
    """Base64 unsigned transaction that the relay key must sign."""
    return build_unsigned_transaction(keypair.pubkey())


@pytest.fixture
def stub_aggregator(unsigned_tx) -> StubAggregator:
    return StubAggregator(unsigned_tx)


@pytest.fixture
def stub_broadcaster() -> StubBroadcaster:
    return StubBroadcaster()


@pytest.fixture
def signed_request() -> Callable[..., tuple[bytes, dict]]:
    """Build a trade body and matching authentication headers."""

    def _build(body, timestamp: str = "1700000000000", secret: str = TEST_SECRET):
        raw = body if isinstance(body, bytes) else json.dumps(body).encode()
        headers = {
            "Content-Type": "application/json",
            "X-Timestamp": timestamp,
            "X-Sign": compute_request_signature(raw, timestamp, secret),
        }
        return raw, headers

    return _build
