"""Abstract venue interface: candle source, account snapshot, order submission."""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from vol_regime_bot.core.types import AccountState, Candle

logger = logging.getLogger("vol_regime_bot.execution")


@dataclass
class OrderResult:
    """Result of submitting an order."""
    success: bool
    order_id: Optional[str] = None
    avg_price: Optional[float] = None
    quantity: Optional[float] = None
    message: str = ""


class ExecutionClient(ABC):
    """Abstract client: klines, symbol info, account state, market orders by base size."""

    @abstractmethod
    def get_klines(self, symbol: str, interval: str, limit: int = 500) -> List[Candle]:
        """Closed and in-progress candles, oldest first."""
        pass

    @abstractmethod
    def get_symbol_info(self, symbol: str) -> Optional[dict]:
        """Exchange symbol info (filters, etc.)."""
        pass

    @abstractmethod
    def get_account_state(self, symbol: str) -> AccountState:
        """Collateral and current signed position size for symbol."""
        pass

    @abstractmethod
    def submit_order(self, symbol: str, base_change: float) -> OrderResult:
        """Market order changing the position by base_change (sign gives direction)."""
        pass

    @abstractmethod
    def set_leverage(self, symbol: str, leverage: int) -> None:
        """Set leverage for symbol."""
        pass


def fetch_interval_map(
    client: ExecutionClient,
    symbol: str,
    intervals: Sequence[str],
    limit: int,
) -> Dict[str, List[Candle]]:
    """Candles per interval. Errors from the client propagate unchanged."""
    candles = {}
    for interval in intervals:
        candles[interval] = client.get_klines(symbol, interval, limit=limit)
        logger.debug("Fetched %d %s candles for %s", len(candles[interval]), interval, symbol)
    return candles
