"""Base types for the relay signing key.

Signing flow:
1. Load the keypair once at startup (fatal if absent)
2. Deserialize the unsigned transaction returned by the aggregator
3. Sign its message with the keypair
4. Hand the signed transaction to the broadcaster
"""

from enum import Enum


class KeySource(str, Enum):
    """Configured encoding of the signing key."""
    BASE58 = "base58"   # TRADER_SECRET_BASE58
    JSON = "json"       # TRADER_SECRET_JSON


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass


class KeyLoadError(SigningError):
    """Exception raised when the signing key cannot be loaded."""
    pass


class MissingKeyError(KeyLoadError):
    """Exception raised when no signing key is configured."""
    pass


class InvalidKeyError(KeyLoadError):
    """Exception raised when the configured key cannot be decoded."""

    def __init__(self, source: KeySource, reason: str):
        self.source = source
        super().__init__(f"Invalid {source.value} signing key: {reason}")
