"""
Volatility-burst breakout strategy.

Enters when a quiet volatility regime is followed by a burst (RV z-score or
percentile rank above threshold) on the same bar as a Donchian breakout, then
ramps leverage for hold_bars before a forced cooldown.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence

import pandas as pd

from vol_regime_bot.core.config import StrategyConfig
from vol_regime_bot.core.errors import EmptyInputError
from vol_regime_bot.core.types import Candle, PositionState, StrategyResult
from vol_regime_bot.strategies import indicators
from vol_regime_bot.strategies.base import BaseStrategy
from vol_regime_bot.strategies.state_machine import PositionStateMachine

logger = logging.getLogger("vol_regime_bot.strategy")

CANDLE_COLUMNS = ["open_time", "close_time", "open", "high", "low", "close", "volume", "interval"]


def _optional(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """OHLCV DataFrame with one row per candle, in input order."""
    if len(candles) == 0:
        raise EmptyInputError("No candles available for strategy evaluation")
    return pd.DataFrame(
        [[getattr(c, col) for col in CANDLE_COLUMNS] for c in candles],
        columns=CANDLE_COLUMNS,
    )


class VolBurstStrategy(BaseStrategy):

    def __init__(self, config: StrategyConfig):
        self.config = config

    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        if df.empty:
            raise EmptyInputError("No candles available for strategy evaluation")
        cfg = self.config
        df = df.reset_index(drop=True).copy()
        df["log_return"] = indicators.log_returns(df["close"])
        df["rv"] = indicators.realized_volatility(df["log_return"], cfg.rv_window, cfg.base_interval_hours)
        df["rv_z"] = indicators.rv_zscore(df["rv"], cfg.rv_z_window)
        df["rv_pct"] = indicators.rv_percentile(df["rv"], cfg.rv_pct_window)
        df["quiet_min"] = indicators.quiet_min(df["rv_pct"], cfg.quiet_lookback)
        df["donchian_upper"], df["donchian_lower"] = indicators.donchian_channel(
            df["high"], df["low"], cfg.donchian_lookback
        )
        df["breakout"] = indicators.breakout_direction(
            df["close"], df["donchian_upper"], df["donchian_lower"], cfg.donchian_buffer
        )
        df["quiet"] = df["quiet_min"].notna() & (df["quiet_min"] <= cfg.quiet_pct)
        df["burst"] = (df["rv_z"].notna() & (df["rv_z"] >= cfg.rv_z_entry)) | (
            df["rv_pct"].notna() & (df["rv_pct"] >= cfg.rv_pct_entry)
        )
        return df

    def evaluate_history(self, df: pd.DataFrame, seed: Optional[PositionState] = None) -> List[StrategyResult]:
        df = self.compute_indicators(df)
        machine = PositionStateMachine(self.config, seed)
        results: List[StrategyResult] = []
        for row in df.itertuples(index=False):
            quiet, burst, breakout = bool(row.quiet), bool(row.burst), int(row.breakout)
            reasoning = machine.step(quiet, burst, breakout)
            st = machine.state
            results.append(
                StrategyResult(
                    timestamp=int(row.close_time),
                    price=float(row.close),
                    rv=_optional(row.rv),
                    rv_z=_optional(row.rv_z),
                    rv_pct=_optional(row.rv_pct),
                    quiet_min=_optional(row.quiet_min),
                    quiet_condition=quiet,
                    burst_condition=burst,
                    breakout_direction=breakout,
                    status=st.status,
                    bars_in_position=st.bars_in_position,
                    cooldown_remaining=st.cooldown_remaining,
                    target_leverage=st.target_leverage,
                    direction=st.direction,
                    bars_since_entry=st.bars_since_entry,
                    reasoning=reasoning,
                )
            )
        last = results[-1]
        logger.debug(
            "Evaluated %d bars: status=%s target_leverage=%.2f",
            len(results), last.status.value, last.target_leverage,
        )
        return results


def evaluate_strategy(
    candles: Sequence[Candle],
    config: StrategyConfig,
    seed: Optional[PositionState] = None,
) -> StrategyResult:
    """Replay every candle through the strategy and return the last bar's result."""
    return VolBurstStrategy(config).evaluate(candles_to_frame(candles), seed)


def evaluate_strategy_history(
    candles: Sequence[Candle],
    config: StrategyConfig,
    seed: Optional[PositionState] = None,
) -> List[StrategyResult]:
    """Per-bar results, each with its own reasoning trail."""
    return VolBurstStrategy(config).evaluate_history(candles_to_frame(candles), seed)
