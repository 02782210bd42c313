"""Strategies: indicators, position state machine, volatility-burst strategy."""

from vol_regime_bot.strategies.base import BaseStrategy
from vol_regime_bot.strategies.state_machine import PositionStateMachine
from vol_regime_bot.strategies.summary import summarize_signal
from vol_regime_bot.strategies.vol_burst import (
    VolBurstStrategy,
    candles_to_frame,
    evaluate_strategy,
    evaluate_strategy_history,
)

__all__ = [
    "BaseStrategy",
    "PositionStateMachine",
    "VolBurstStrategy",
    "candles_to_frame",
    "evaluate_strategy",
    "evaluate_strategy_history",
    "summarize_signal",
]
