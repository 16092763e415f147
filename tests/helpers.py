"""Shared test doubles and builders."""

import base64
from typing import Optional

import pytest
from solders.hash import Hash
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

from swaprelay.errors import QuoteFailedError, SwapPrepFailedError
from swaprelay.routing.base import Quote, SwapAggregator, UnsignedSwap

TEST_SECRET = "test-hmac-secret"
TEST_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
FIXED_QUOTE = {
    "inputMint": "So11111111111111111111111111111111111111112",
    "outputMint": TEST_MINT,
    "inAmount": "10000000",
    "outAmount": "1520000",
    "routePlan": [],
}


def build_unsigned_transaction(payer: Pubkey) -> str:
    """Compile a one-instruction v0 transaction with an empty signature slot."""
    ix = transfer(TransferParams(from_pubkey=payer, to_pubkey=Pubkey.new_unique(), lamports=1000))
    message = MessageV0.try_compile(payer, [ix], [], Hash.default())
    tx = VersionedTransaction.populate(message, [Signature.default()])
    return base64.b64encode(bytes(tx)).decode()


class StubAggregator(SwapAggregator):
    """Aggregator double returning a fixed quote and transaction."""

    def __init__(
        self,
        swap_transaction: str,
        quote_status: int = 200,
        swap_status: int = 200,
    ):
        self.swap_transaction = swap_transaction
        self.quote_status = quote_status
        self.swap_status = swap_status
        self.quote_calls: list[tuple] = []
        self.swap_calls: list[dict] = []

    @property
    def name(self) -> str:
        return "Stub"

    async def get_quote(self, input_mint, output_mint, amount, slippage_bps) -> Quote:
        self.quote_calls.append((input_mint, output_mint, amount, slippage_bps))
        if self.quote_status != 200:
            raise QuoteFailedError(f"stub quote returned {self.quote_status}")
        return dict(FIXED_QUOTE)

    async def build_swap(
        self,
        quote,
        user_public_key,
        wrap_and_unwrap_sol=True,
        prioritization_fee_lamports=None,
    ) -> UnsignedSwap:
        self.swap_calls.append({
            "quote": quote,
            "user_public_key": user_public_key,
            "wrap_and_unwrap_sol": wrap_and_unwrap_sol,
            "prioritization_fee_lamports": prioritization_fee_lamports,
        })
        if self.swap_status != 200:
            raise SwapPrepFailedError(f"stub swap returned {self.swap_status}")
        return UnsignedSwap(swap_transaction=self.swap_transaction)


class ForbiddenAggregator(SwapAggregator):
    """Aggregator double that fails the test if it is ever called."""

    @property
    def name(self) -> str:
        return "Forbidden"

    async def get_quote(self, *args, **kwargs):
        pytest.fail("aggregator quote endpoint must not be called")

    async def build_swap(self, *args, **kwargs):
        pytest.fail("aggregator swap endpoint must not be called")


class StubBroadcaster:
    """Broadcaster double recording submitted transactions."""

    def __init__(self, txid: str = "sig123", error: Optional[Exception] = None):
        self.txid = txid
        self.error = error
        self.submitted: list[VersionedTransaction] = []

    async def submit(self, signed: VersionedTransaction) -> str:
        self.submitted.append(signed)
        if self.error is not None:
            raise self.error
        return self.txid
