"""Convert a strategy result into a base-asset position size."""

from __future__ import annotations
from dataclasses import fields

from vol_regime_bot.core.types import SignalSummary, StrategyResult


def summarize_signal(result: StrategyResult, max_notional: float) -> SignalSummary:
    """target_base = max_notional / price * target_leverage; 0 when price <= 0."""
    base_unit = max_notional / result.price if result.price > 0 else 0.0
    values = {f.name: getattr(result, f.name) for f in fields(StrategyResult)}
    values["reasoning"] = list(result.reasoning)
    return SignalSummary(**values, target_base=base_unit * result.target_leverage)
