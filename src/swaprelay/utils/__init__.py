"""Utility modules for swaprelay."""

from swaprelay.utils.locks import LockTimeoutError, SigningKeyLock, get_signing_lock

__all__ = ["LockTimeoutError", "SigningKeyLock", "get_signing_lock"]
