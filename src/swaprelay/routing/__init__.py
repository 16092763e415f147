"""Swap routing via the Jupiter aggregator."""

from swaprelay.routing.base import AggregatorError, Quote, SwapAggregator, UnsignedSwap
from swaprelay.routing.jupiter import JupiterAggregator

__all__ = [
    "AggregatorError",
    "JupiterAggregator",
    "Quote",
    "SwapAggregator",
    "UnsignedSwap",
]
