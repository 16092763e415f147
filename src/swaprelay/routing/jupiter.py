"""Jupiter DEX aggregator integration for Solana.

Uses the Jupiter v6 swap API: one GET for the quote, one POST to turn the
quote into an unsigned transaction.
API docs: https://station.jup.ag/docs/apis/swap-api
"""

import logging
from typing import Optional

import httpx

from swaprelay.errors import QuoteFailedError, SwapPrepFailedError
from swaprelay.routing.base import AggregatorError, Quote, SwapAggregator, UnsignedSwap

logger = logging.getLogger(__name__)

JUPITER_API_VERSION = "v6"


class JupiterAggregator(SwapAggregator):
    """Jupiter quote and swap-build client.

    No retries and no caching: each trade gets a fresh quote, and any
    non-success status is reported to the caller as-is.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient):
        """Initialize Jupiter client.

        Args:
            base_url: Aggregator base URL, e.g. https://quote-api.jup.ag
            client: Shared HTTP client (owns timeouts and connection pooling)
        """
        self.base_url = f"{base_url.rstrip('/')}/{JUPITER_API_VERSION}"
        self._client = client

    @property
    def name(self) -> str:
        return "Jupiter"

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> Quote:
        """Get swap quote from Jupiter.

        Args:
            input_mint: Mint being spent
            output_mint: Mint being bought
            amount: Input amount in base units (lamports for SOL)
            slippage_bps: Max slippage in basis points

        Returns:
            Raw quote response, to be passed back to build_swap
        """
        response = await self._client.get(
            f"{self.base_url}/quote",
            params={
                "inputMint": input_mint,
                "outputMint": output_mint,
                "amount": str(amount),
                "slippageBps": str(slippage_bps),
            },
        )

        if not response.is_success:
            logger.warning(f"Jupiter quote error: {response.status_code} - {response.text}")
            raise QuoteFailedError(f"Jupiter quote returned {response.status_code}")

        quote = response.json()
        logger.debug(
            f"Jupiter quote {input_mint} -> {output_mint}: "
            f"in={quote.get('inAmount')} out={quote.get('outAmount')}"
        )
        return quote

    async def build_swap(
        self,
        quote: Quote,
        user_public_key: str,
        wrap_and_unwrap_sol: bool = True,
        prioritization_fee_lamports: Optional[int] = None,
    ) -> UnsignedSwap:
        """Get the unsigned swap transaction for a quote.

        The priority fee is sent only when configured; an explicit zero is not
        the same request as no preference.
        """
        payload = {
            "quoteResponse": quote,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": wrap_and_unwrap_sol,
        }
        if prioritization_fee_lamports is not None:
            payload["prioritizationFeeLamports"] = int(prioritization_fee_lamports)

        response = await self._client.post(f"{self.base_url}/swap", json=payload)

        if not response.is_success:
            logger.warning(f"Jupiter swap error: {response.status_code} - {response.text}")
            raise SwapPrepFailedError(f"Jupiter swap returned {response.status_code}")

        data = response.json()
        swap_tx = data.get("swapTransaction")
        if not isinstance(swap_tx, str) or not swap_tx:
            raise AggregatorError("No swap transaction returned")

        return UnsignedSwap(swap_transaction=swap_tx)
