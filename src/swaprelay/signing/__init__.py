"""Transaction signing for the relay key.

- load_keypair: loads the single signing keypair from configuration
- TransactionSigner: signs aggregator swap transactions with it
"""

from swaprelay.signing.base import (
    InvalidKeyError,
    KeyLoadError,
    KeySource,
    MissingKeyError,
    SigningError,
)
from swaprelay.signing.keys import load_keypair
from swaprelay.signing.local import TransactionSigner

__all__ = [
    "InvalidKeyError",
    "KeyLoadError",
    "KeySource",
    "MissingKeyError",
    "SigningError",
    "TransactionSigner",
    "load_keypair",
]
