"""
Trade planner: move the current position towards the signal's target base size,
clipped to the notional cap per trade and rounded to the exchange lot step.
"""

from __future__ import annotations
import logging
from typing import Optional

from vol_regime_bot.core.types import SignalSummary, TradeDecision
from vol_regime_bot.utils.exchange_filters import parse_symbol_filters, round_quantity

logger = logging.getLogger("vol_regime_bot.risk")


class RiskManager:
    """
    Enforces: at most max_notional worth of base asset per trade, lot-step rounding,
    and a minimum trade size below which the rebalance is skipped.
    """

    def __init__(
        self,
        max_notional: float,
        min_trade_base: float = 0.01,
        symbol_info: Optional[dict] = None,
    ):
        self.max_notional = max_notional
        self.min_trade_base = min_trade_base
        self._min_qty, self._lot_step = parse_symbol_filters(symbol_info)

    def max_base_per_trade(self, price: float) -> float:
        if price <= 0:
            return 0.0
        return self.max_notional / price

    def plan_trade(self, signal: SignalSummary, current_base: float, dry_run: bool = True) -> TradeDecision:
        """Decide the base-asset change for this cycle."""
        desired = signal.target_base
        delta = desired - current_base
        cap = self.max_base_per_trade(signal.price)
        clipped = max(-cap, min(cap, delta))
        clipped = round_quantity(clipped, self._min_qty, self._lot_step)
        decision = TradeDecision(
            desired_base=desired,
            current_base=current_base,
            delta_base=delta,
            clipped_base=clipped,
            dry_run=dry_run,
        )
        if abs(clipped) < self.min_trade_base:
            decision.should_trade = False
            decision.reason = "below minimum trade size"
        elif abs(clipped) < abs(delta):
            logger.info("Delta %.4f clipped to %.4f by max notional %.2f", delta, clipped, self.max_notional)
        return decision
