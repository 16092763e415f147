"""Abstract interface for the swap aggregator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

# Aggregator quotes are forwarded verbatim; the relay never reads their fields
Quote = dict[str, Any]


@dataclass(frozen=True)
class UnsignedSwap:
    """An unsigned swap transaction built by the aggregator.

    Tied to one quote and one user public key. Sign it once; build a new one
    to retry.
    """

    swap_transaction: str  # base64 serialized VersionedTransaction


class AggregatorError(Exception):
    """Exception raised for an unusable aggregator response."""
    pass


class SwapAggregator(ABC):
    """Abstract base class for quote and swap-build providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
    ) -> Quote:
        """Get a quote for swapping `amount` base units of input_mint.

        Raises:
            QuoteFailedError: If the aggregator rejects the request
        """
        pass

    @abstractmethod
    async def build_swap(
        self,
        quote: Quote,
        user_public_key: str,
        wrap_and_unwrap_sol: bool = True,
        prioritization_fee_lamports: Optional[int] = None,
    ) -> UnsignedSwap:
        """Build an unsigned transaction executing `quote` for a user.

        Raises:
            SwapPrepFailedError: If the aggregator rejects the request
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
