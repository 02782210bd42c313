"""
Rolling indicators for the volatility-burst strategy.
Windows are recomputed per bar; a value is NaN until its full window is available.
"""

from __future__ import annotations
import math
from typing import Tuple

import numpy as np
import pandas as pd

from vol_regime_bot.core.errors import EmptyInputError


def _population_std(values: np.ndarray) -> float:
    return float(np.std(values, ddof=0))


def _zscore_last(values: np.ndarray) -> float:
    std = _population_std(values)
    if std == 0:
        return 0.0
    return float((values[-1] - values.mean()) / std)


def _percentile_rank_last(values: np.ndarray) -> float:
    return float(np.count_nonzero(values <= values[-1]) / len(values))


def log_returns(close: pd.Series) -> pd.Series:
    """ln(close[i] / close[i-1]); the first bar has no prior close and gets 0."""
    if len(close) == 0:
        raise EmptyInputError("No closes to compute returns from")
    close = close.astype(float)
    returns = np.log(close / close.shift(1))
    returns.iloc[0] = 0.0
    return returns


def realized_volatility(returns: pd.Series, window: int, base_interval_hours: float) -> pd.Series:
    """
    Population std of the trailing `window` returns, scaled by sqrt(24 / base_interval_hours).
    The synthetic zero return at index 0 never enters a window.
    """
    usable = returns.astype(float).copy()
    usable.iloc[:1] = np.nan
    std = usable.rolling(window, min_periods=window).apply(_population_std, raw=True)
    return std * math.sqrt(24 / base_interval_hours)


def rv_zscore(rv: pd.Series, window: int) -> pd.Series:
    """(rv - mean) / std over the trailing window; 0 when the window has no dispersion."""
    return rv.rolling(window, min_periods=window).apply(_zscore_last, raw=True)


def rv_percentile(rv: pd.Series, window: int) -> pd.Series:
    """Fraction of the trailing window (current bar included) at or below the current value."""
    return rv.rolling(window, min_periods=window).apply(_percentile_rank_last, raw=True)


def quiet_min(rv_pct: pd.Series, lookback: int) -> pd.Series:
    """Lowest percentile rank over the trailing lookback."""
    return rv_pct.rolling(lookback, min_periods=lookback).min()


def donchian_channel(high: pd.Series, low: pd.Series, lookback: int) -> Tuple[pd.Series, pd.Series]:
    """Highest high / lowest low over the `lookback` bars before each bar (current bar excluded)."""
    upper = high.astype(float).rolling(lookback, min_periods=lookback).max().shift(1)
    lower = low.astype(float).rolling(lookback, min_periods=lookback).min().shift(1)
    return upper, lower


def breakout_direction(close: pd.Series, upper: pd.Series, lower: pd.Series, buffer: float) -> pd.Series:
    """+1 above upper*(1+buffer), -1 below lower*(1-buffer), else 0. Long is tested first."""
    close = close.astype(float)
    long_break = (close >= upper * (1 + buffer)).to_numpy()
    short_break = (close <= lower * (1 - buffer)).to_numpy()
    direction = np.select([long_break, short_break], [1, -1], default=0)
    return pd.Series(direction, index=close.index, dtype=int)
