"""Abstract strategy: indicators + per-bar evaluation."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

import pandas as pd

from vol_regime_bot.core.types import PositionState, StrategyResult


class BaseStrategy(ABC):
    """Strategy computes indicator columns and replays them bar by bar into results."""

    @abstractmethod
    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add indicator columns to OHLCV DataFrame. No lookahead."""
        pass

    @abstractmethod
    def evaluate_history(self, df: pd.DataFrame, seed: Optional[PositionState] = None) -> List[StrategyResult]:
        """One StrategyResult per bar, oldest first."""
        pass

    def evaluate(self, df: pd.DataFrame, seed: Optional[PositionState] = None) -> StrategyResult:
        """Result at the last bar; every bar is still replayed since state depends on history."""
        return self.evaluate_history(df, seed)[-1]
