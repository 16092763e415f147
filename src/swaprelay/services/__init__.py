"""Trade services."""

from swaprelay.services.trade_executor import TradeExecutor, TradeResult, TradeState

__all__ = ["TradeExecutor", "TradeResult", "TradeState"]
