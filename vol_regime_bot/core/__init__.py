"""Core: config, types, errors, logging."""

from vol_regime_bot.core.config import load_config, Config, StrategyConfig, build_strategy_config
from vol_regime_bot.core.errors import VolBotError, EmptyInputError, InvalidConfigError
from vol_regime_bot.core.types import (
    Candle,
    StrategyStatus,
    PositionState,
    StrategyResult,
    SignalSummary,
    AccountState,
    TradeDecision,
)
from vol_regime_bot.core.logger import setup_logging, setup_logging_from_config

__all__ = [
    "load_config",
    "Config",
    "StrategyConfig",
    "build_strategy_config",
    "VolBotError",
    "EmptyInputError",
    "InvalidConfigError",
    "Candle",
    "StrategyStatus",
    "PositionState",
    "StrategyResult",
    "SignalSummary",
    "AccountState",
    "TradeDecision",
    "setup_logging",
    "setup_logging_from_config",
]
