"""
Binance USDT-M Futures client with rate-limit retry.
"""

from __future__ import annotations
import functools
import logging
import time
from typing import List, Optional

from binance.client import Client
from binance.exceptions import BinanceAPIException

from vol_regime_bot.core.types import AccountState, Candle
from vol_regime_bot.execution.base import ExecutionClient, OrderResult
from vol_regime_bot.utils.exchange_filters import parse_symbol_filters, round_quantity

logger = logging.getLogger("vol_regime_bot.execution.binance")


def retry_on_rate_limit(max_retries: int = 3, base_delay: float = 1.0):
    """Decorator: retry on 429 or 418 (rate limit)."""
    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            for attempt in range(max_retries):
                try:
                    return f(*args, **kwargs)
                except BinanceAPIException as e:
                    if e.status_code in (429, 418) and attempt < max_retries - 1:
                        delay = base_delay * (2 ** attempt)
                        logger.warning("Rate limited, retry in %.1fs (attempt %d)", delay, attempt + 1)
                        time.sleep(delay)
                    else:
                        raise
        return wrapped
    return decorator


def parse_kline(raw: list, interval: str) -> Candle:
    """Binance kline row -> Candle."""
    return Candle(
        open_time=int(raw[0]),
        close_time=int(raw[6]),
        open=float(raw[1]),
        high=float(raw[2]),
        low=float(raw[3]),
        close=float(raw[4]),
        volume=float(raw[5]),
        interval=interval,
    )


class BinanceFuturesClient(ExecutionClient):
    """Binance USDT-M Futures client (testnet and live)."""

    def __init__(self, api_key: str, api_secret: str, testnet: bool = True):
        self._client = Client(api_key, api_secret, testnet=testnet)
        logger.info("Binance Futures: using %s", "TESTNET" if testnet else "LIVE")
        self._symbol_info: dict = {}

    @retry_on_rate_limit(max_retries=3, base_delay=1.0)
    def get_klines(self, symbol: str, interval: str, limit: int = 500) -> List[Candle]:
        raw = self._client.futures_klines(symbol=symbol, interval=interval, limit=limit)
        return [parse_kline(row, interval) for row in raw]

    @retry_on_rate_limit(max_retries=2)
    def get_symbol_info(self, symbol: str) -> Optional[dict]:
        if symbol not in self._symbol_info:
            info = self._client.futures_exchange_info()
            for s in info.get("symbols", []):
                if s.get("symbol") == symbol:
                    self._symbol_info[symbol] = s
                    break
        return self._symbol_info.get(symbol)

    @retry_on_rate_limit(max_retries=2)
    def get_account_state(self, symbol: str) -> AccountState:
        account = self._client.futures_account()
        position_base = 0.0
        for p in self._client.futures_position_information(symbol=symbol):
            if p.get("symbol", symbol) == symbol:
                position_base += float(p.get("positionAmt", 0.0))
        return AccountState(
            total_collateral=float(account.get("totalMarginBalance", 0.0)),
            free_collateral=float(account.get("availableBalance", 0.0)),
            position_base=position_base,
        )

    def set_leverage(self, symbol: str, leverage: int) -> None:
        try:
            self._client.futures_change_leverage(symbol=symbol, leverage=leverage)
            logger.info("Leverage set to %sx for %s", leverage, symbol)
        except BinanceAPIException as e:
            logger.warning("Could not set leverage: %s", e)

    def submit_order(self, symbol: str, base_change: float) -> OrderResult:
        if base_change == 0:
            raise ValueError("No base change requested")
        min_qty, lot_step = parse_symbol_filters(self.get_symbol_info(symbol))
        qty = abs(round_quantity(base_change, min_qty, lot_step))
        if qty == 0:
            raise ValueError(f"Requested size {base_change} is below 1 lot")
        side = "BUY" if base_change > 0 else "SELL"
        try:
            res = self._client.futures_create_order(
                symbol=symbol, side=side, type="MARKET", quantity=str(qty)
            )
        except BinanceAPIException as e:
            logger.exception("Binance order error: %s", e)
            return OrderResult(success=False, message=str(e))
        avg = res.get("avgPrice") or res.get("price")
        return OrderResult(
            success=True,
            order_id=str(res.get("orderId")),
            avg_price=float(avg) if avg else None,
            quantity=qty,
        )
