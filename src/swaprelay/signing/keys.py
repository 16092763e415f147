"""Signing key loading.

Exactly one keypair is loaded per process. Two encodings are supported:

- TRADER_SECRET_BASE58: base58 string of the secret key bytes
- TRADER_SECRET_JSON: JSON array of byte values, as written by `solana-keygen`

If both are set the base58 key is used and the JSON key is ignored.
"""

import json
import logging
from typing import Optional

import base58
from solders.keypair import Keypair

from swaprelay.config import Settings
from swaprelay.signing.base import InvalidKeyError, KeySource, MissingKeyError

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64  # ed25519 seed + public key
SEED_LENGTH = 32


def resolve_key_source(settings: Settings) -> Optional[tuple[KeySource, str]]:
    """Pick the configured key source.

    Returns:
        Tuple of (source, encoded value), or None if no key is configured
    """
    if settings.trader_secret_base58:
        if settings.trader_secret_json:
            logger.warning("Both TRADER_SECRET_BASE58 and TRADER_SECRET_JSON set - using base58")
        return KeySource.BASE58, settings.trader_secret_base58
    if settings.trader_secret_json:
        return KeySource.JSON, settings.trader_secret_json
    return None


def decode_secret(source: KeySource, encoded: str) -> bytes:
    """Decode a configured secret into raw key bytes."""
    if source == KeySource.BASE58:
        try:
            return base58.b58decode(encoded.strip())
        except ValueError as e:
            raise InvalidKeyError(source, str(e)) from e

    try:
        values = json.loads(encoded)
    except json.JSONDecodeError as e:
        raise InvalidKeyError(source, "not valid JSON") from e

    if not isinstance(values, list):
        raise InvalidKeyError(source, "expected a JSON array of byte values")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise InvalidKeyError(source, f"{value!r} is not a byte value")
    return bytes(values)


def keypair_from_secret(source: KeySource, secret: bytes) -> Keypair:
    """Build a keypair from a full secret key or a bare 32-byte seed."""
    if len(secret) == SECRET_KEY_LENGTH:
        try:
            return Keypair.from_bytes(secret)
        except Exception as e:
            raise InvalidKeyError(source, str(e)) from e
    if len(secret) == SEED_LENGTH:
        return Keypair.from_seed(secret)
    raise InvalidKeyError(
        source, f"expected {SECRET_KEY_LENGTH} or {SEED_LENGTH} bytes, got {len(secret)}"
    )


def load_keypair(settings: Settings) -> Keypair:
    """Load the relay signing keypair.

    Raises:
        MissingKeyError: If neither key source is configured
        InvalidKeyError: If the configured key cannot be decoded
    """
    resolved = resolve_key_source(settings)
    if resolved is None:
        raise MissingKeyError("No private key provided (set TRADER_SECRET_BASE58 or TRADER_SECRET_JSON)")

    source, encoded = resolved
    keypair = keypair_from_secret(source, decode_secret(source, encoded))
    logger.info(f"Loaded signing key from {source.value} source: {keypair.pubkey()}")
    return keypair
