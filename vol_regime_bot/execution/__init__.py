"""Execution: venue abstraction and Binance Futures implementation."""

from vol_regime_bot.execution.base import ExecutionClient, OrderResult, fetch_interval_map
from vol_regime_bot.execution.binance_futures import BinanceFuturesClient

__all__ = ["ExecutionClient", "OrderResult", "fetch_interval_map", "BinanceFuturesClient"]
