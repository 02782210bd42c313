"""
Core data types: candles, position state, strategy results, venue snapshots.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional


class StrategyStatus(str, Enum):
    FLAT = "flat"
    LONG = "long"
    SHORT = "short"
    COOLDOWN = "cooldown"


@dataclass(frozen=True)
class Candle:
    """OHLCV candle. Times are epoch milliseconds."""
    open_time: int
    close_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    interval: str


@dataclass
class PositionState:
    """Mutable position state carried across bars within one evaluation."""
    status: StrategyStatus = StrategyStatus.FLAT
    direction: int = 0
    bars_since_entry: int = 0
    cooldown_remaining: int = 0
    target_leverage: float = 0.0
    bars_in_position: int = 0

    @property
    def in_position(self) -> bool:
        return self.status in (StrategyStatus.LONG, StrategyStatus.SHORT)


@dataclass
class StrategyResult:
    """Classifier outputs and position state at one bar (normally the last)."""
    timestamp: int
    price: float
    rv: Optional[float]
    rv_z: Optional[float]
    rv_pct: Optional[float]
    quiet_min: Optional[float]
    quiet_condition: bool
    burst_condition: bool
    breakout_direction: int
    status: StrategyStatus
    bars_in_position: int
    cooldown_remaining: int
    target_leverage: float
    direction: int = 0
    bars_since_entry: int = 0
    reasoning: List[str] = field(default_factory=list)

    def position_state(self) -> PositionState:
        """State to persist and pass back as a seed on the next run."""
        return PositionState(
            status=self.status,
            direction=self.direction,
            bars_since_entry=self.bars_since_entry,
            cooldown_remaining=self.cooldown_remaining,
            target_leverage=self.target_leverage,
            bars_in_position=self.bars_in_position,
        )

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["status"] = self.status.value
        data["reasoning"] = list(self.reasoning)
        return data


@dataclass
class SignalSummary(StrategyResult):
    """StrategyResult plus the position size in base-asset units."""
    target_base: float = 0.0


@dataclass
class AccountState:
    """Venue snapshot: collateral in quote currency, position in base units."""
    total_collateral: float
    free_collateral: float
    position_base: float


@dataclass
class TradeDecision:
    """Planned change from the current position towards the signal's target."""
    desired_base: float
    current_base: float
    delta_base: float
    clipped_base: float
    dry_run: bool
    should_trade: bool = True
    reason: str = ""
