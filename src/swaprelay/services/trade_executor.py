"""Trade execution pipeline.

One trade = authenticate -> validate -> quote -> build -> sign -> broadcast.

Every step either advances the trade or ends it. Named failures (bad_hmac,
bad_body, quote_failed, swap_prep_failed) are reported with their code; any
other exception is reported with its own description. The result is always a
TradeResult, never an exception.

Once a transaction is signed, a failure result does not guarantee that nothing
reached the chain (e.g. a broadcast that timed out after the node accepted it).
"""

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from solders.keypair import Keypair

from swaprelay.auth import verify_request_signature
from swaprelay.broadcast import SolanaBroadcaster
from swaprelay.config import Settings
from swaprelay.contracts import TradeRequest
from swaprelay.errors import BadAuthenticationError, BadRequestBodyError, TradeError
from swaprelay.routing.base import SwapAggregator
from swaprelay.signing.local import TransactionSigner
from swaprelay.utils.locks import SigningKeyLock

logger = logging.getLogger(__name__)


class TradeState(str, Enum):
    """Progress of a single trade."""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    QUOTED = "quoted"
    BUILT = "built"
    SIGNED = "signed"
    BROADCAST = "broadcast"
    DONE = "done"
    ERROR = "error"


@dataclass
class TradeResult:
    """Outcome of a trade, in the shape returned to the caller."""

    ok: bool
    status_code: int = 200
    tx: Optional[str] = None
    pubkey: Optional[str] = None
    error: Optional[str] = None
    state: TradeState = TradeState.DONE
    failed_at: Optional[TradeState] = None  # last state reached before the error

    @classmethod
    def succeeded(cls, tx: str, pubkey: str) -> "TradeResult":
        return cls(ok=True, tx=tx, pubkey=pubkey)

    @classmethod
    def failed(cls, error: str, status_code: int, failed_at: TradeState) -> "TradeResult":
        return cls(
            ok=False,
            status_code=status_code,
            error=error,
            state=TradeState.ERROR,
            failed_at=failed_at,
        )

    def to_dict(self) -> dict:
        """Convert to the JSON response body."""
        if self.ok:
            return {"ok": True, "tx": self.tx, "pubkey": self.pubkey}
        return {"ok": False, "error": self.error}


@dataclass(frozen=True)
class TradeParameters:
    """Fixed parameters applied to every trade."""

    input_mint: str
    slippage_bps: int
    prioritization_fee_lamports: Optional[int] = None
    wrap_and_unwrap_sol: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "TradeParameters":
        return cls(
            input_mint=settings.input_mint,
            slippage_bps=settings.slippage_bps,
            prioritization_fee_lamports=settings.prioritization_fee_lamports,
        )


class TradeExecutor:
    """Runs authenticated SOL -> token swaps for the relay key."""

    def __init__(
        self,
        keypair: Keypair,
        hmac_secret: str,
        aggregator: SwapAggregator,
        broadcaster: SolanaBroadcaster,
        params: TradeParameters,
        serialize_signing: bool = False,
        lock_timeout: Optional[float] = 60.0,
    ):
        self._signer = TransactionSigner(keypair)
        self._hmac_secret = hmac_secret
        self._aggregator = aggregator
        self._broadcaster = broadcaster
        self._params = params
        self._serialize_signing = serialize_signing
        self._lock_timeout = lock_timeout
        self.pubkey = str(keypair.pubkey())

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        keypair: Keypair,
        aggregator: SwapAggregator,
        broadcaster: SolanaBroadcaster,
    ) -> "TradeExecutor":
        return cls(
            keypair=keypair,
            hmac_secret=settings.hmac_secret,
            aggregator=aggregator,
            broadcaster=broadcaster,
            params=TradeParameters.from_settings(settings),
            serialize_signing=settings.serialize_signing,
            lock_timeout=settings.signing_lock_timeout_seconds,
        )

    def authenticate(
        self,
        raw_body: bytes,
        timestamp: Optional[str],
        signature: Optional[str],
    ) -> None:
        """Check the request signature.

        Raises:
            BadAuthenticationError: If the secret or a header is missing, or the
                signature does not match
        """
        if not self._hmac_secret or not timestamp or not signature:
            raise BadAuthenticationError("secret or authentication headers missing")
        if not verify_request_signature(raw_body, timestamp, signature, self._hmac_secret):
            raise BadAuthenticationError("signature mismatch")

    @staticmethod
    def parse_request(raw_body: bytes) -> TradeRequest:
        """Validate the trade body.

        Raises:
            BadRequestBodyError: If mintOut or a positive amountSol is missing
        """
        try:
            return TradeRequest.from_body(raw_body)
        except ValueError as e:
            raise BadRequestBodyError(str(e)) from e

    def _signing_guard(self):
        if self._serialize_signing:
            return SigningKeyLock(self.pubkey, timeout=self._lock_timeout)
        return nullcontext()

    async def execute(
        self,
        raw_body: bytes,
        timestamp: Optional[str],
        signature: Optional[str],
    ) -> TradeResult:
        """Run one trade end to end.

        Args:
            raw_body: Exact request body bytes
            timestamp: X-Timestamp header
            signature: X-Sign header

        Returns:
            TradeResult (success with transaction id, or failure)
        """
        state = TradeState.UNAUTHENTICATED

        try:
            self.authenticate(raw_body, timestamp, signature)
            state = TradeState.AUTHENTICATED

            request = self.parse_request(raw_body)
            lamports = request.lamports
            logger.info(
                f"Trade: {request.amount_sol} SOL ({lamports} lamports) -> {request.mint_out} "
                f"via {self._aggregator.name}"
            )

            async with self._signing_guard():
                quote = await self._aggregator.get_quote(
                    self._params.input_mint,
                    request.mint_out,
                    lamports,
                    self._params.slippage_bps,
                )
                state = TradeState.QUOTED

                unsigned = await self._aggregator.build_swap(
                    quote,
                    self.pubkey,
                    wrap_and_unwrap_sol=self._params.wrap_and_unwrap_sol,
                    prioritization_fee_lamports=self._params.prioritization_fee_lamports,
                )
                state = TradeState.BUILT

                signed = self._signer.sign(unsigned)
                state = TradeState.SIGNED

                txid = await self._broadcaster.submit(signed)
                state = TradeState.BROADCAST

            state = TradeState.DONE
            logger.info(f"Trade complete: {txid}")
            return TradeResult.succeeded(txid, self.pubkey)

        except TradeError as e:
            logger.warning(f"Trade rejected at {state.value}: {e.code.value} ({e.detail})")
            return TradeResult.failed(e.code.value, e.status_code, state)

        except Exception as e:
            logger.exception(f"Trade failed at {state.value}: {e}")
            return TradeResult.failed(str(e) or e.__class__.__name__, 500, state)
