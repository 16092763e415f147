"""Local transaction signer.

Signs Jupiter swap transactions with the in-memory relay keypair.

Jupiter returns a serialized versioned transaction whose signature slots are
zero-filled placeholders. The relay key must be one of the message's required
signers; its slot is replaced with an ed25519 signature over the message.
"""

import base64
import logging

from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from swaprelay.routing.base import UnsignedSwap
from swaprelay.signing.base import SigningError

logger = logging.getLogger(__name__)


class TransactionSigner:
    """Signs unsigned swap transactions with a single keypair."""

    def __init__(self, keypair: Keypair):
        self._keypair = keypair

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    def sign(self, unsigned: UnsignedSwap) -> VersionedTransaction:
        """Decode, sign and re-assemble a swap transaction.

        Args:
            unsigned: Base64 transaction from the aggregator

        Returns:
            Signed VersionedTransaction ready for broadcast

        Raises:
            SigningError: If the relay key is not a required signer
        """
        raw = base64.b64decode(unsigned.swap_transaction, validate=True)
        tx = VersionedTransaction.from_bytes(raw)
        return self.sign_transaction(tx)

    def sign_transaction(self, tx: VersionedTransaction) -> VersionedTransaction:
        """Place the relay signature into its slot of a decoded transaction."""
        message = tx.message
        num_signers = message.header.num_required_signatures
        signers = list(message.account_keys[:num_signers])

        try:
            slot = signers.index(self.pubkey)
        except ValueError:
            raise SigningError(f"{self.pubkey} is not a required signer of this transaction")

        signatures = list(tx.signatures)
        signatures[slot] = self._keypair.sign_message(to_bytes_versioned(message))

        signed = VersionedTransaction.populate(message, signatures)
        logger.debug(f"Signed transaction {signatures[0]} (slot {slot} of {num_signers})")
        return signed
