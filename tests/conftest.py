"""Shared candle fixtures."""

import math

import pytest

from vol_regime_bot.core.config import build_strategy_config
from vol_regime_bot.core.types import Candle

DAY_MS = 86_400_000


def make_candles(closes, interval="1d"):
    """Candles with open = high = low = close so the Donchian channel tracks closes."""
    return [
        Candle(
            open_time=i * DAY_MS,
            close_time=(i + 1) * DAY_MS - 1,
            open=c,
            high=c,
            low=c,
            close=c,
            volume=1000.0,
            interval=interval,
        )
        for i, c in enumerate(closes)
    ]


def closes_from_returns(returns, start=100.0):
    closes = [start]
    for r in returns:
        closes.append(closes[-1] * math.exp(r))
    return closes


@pytest.fixture
def small_config():
    """Short windows; sqrt(24/24) = 1 so RV equals the raw population std."""
    return build_strategy_config(
        3.0,
        rv_window=3,
        rv_z_window=5,
        rv_pct_window=5,
        quiet_lookback=3,
        donchian_lookback=5,
        hold_bars=3,
        ramp_per_bar=0.5,
        cooldown_bars=2,
        base_interval_hours=24,
    )


@pytest.fixture
def breakout_candles():
    """
    Bars 0-15: alternating returns shrinking by 0.8 per bar, so RV falls every bar
    (quiet regime). Bar 16: +5% jump (burst and upside breakout). Bars 17-22: tiny chop.
    """
    quiet = [0.01 * 0.8 ** k * (-1) ** k for k in range(1, 16)]
    jump = [0.05]
    chop = [0.0001 * (-1) ** k for k in range(6)]
    return make_candles(closes_from_returns(quiet + jump + chop))
