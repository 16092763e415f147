"""HMAC request authentication.

A caller signs each trade with the shared secret:

    X-Sign = hex(HMAC-SHA256(secret, raw_body + X-Timestamp))

The timestamp is bound into the digest but is not checked for freshness, so a
captured request stays valid for as long as the secret does.
"""

import hashlib
import hmac
from typing import Optional, Union


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


def compute_request_signature(
    raw_body: bytes,
    timestamp: str,
    secret: Union[str, bytes],
) -> str:
    """Compute the lowercase hex HMAC-SHA256 of body + timestamp."""
    message = _as_bytes(raw_body) + timestamp.encode("utf-8")
    return hmac.new(_as_bytes(secret), message, hashlib.sha256).hexdigest()


def verify_request_signature(
    raw_body: bytes,
    timestamp: Optional[str],
    signature: Optional[str],
    secret: Union[str, bytes, None],
) -> bool:
    """Verify a request signature in constant time.

    Args:
        raw_body: Exact request body bytes as received
        timestamp: Value of the X-Timestamp header
        signature: Value of the X-Sign header (lowercase hex)
        secret: Shared HMAC secret

    Returns:
        True only if the signature matches. Never raises: a missing secret or
        header, a wrong-length or non-hex signature all return False.
    """
    if not secret or not timestamp or not signature:
        return False

    try:
        expected = compute_request_signature(raw_body, timestamp, secret)
        provided = signature.encode("utf-8")
    except (TypeError, UnicodeEncodeError):
        return False

    # Byte strings: compare_digest handles unequal lengths without raising
    return hmac.compare_digest(expected.encode("ascii"), provided)
