"""
Position state machine: flat -> long/short -> cooldown -> flat.
Advanced once per bar with that bar's regime and breakout signals.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import List, Optional

from vol_regime_bot.core.config import StrategyConfig
from vol_regime_bot.core.types import PositionState, StrategyStatus

logger = logging.getLogger("vol_regime_bot.strategy.state")


class PositionStateMachine:
    """
    Entry needs a quiet regime, a volatility burst and a Donchian breakout on the same bar.
    Leverage ramps by ramp_per_bar each bar held; after hold_bars the position is
    force-closed into a cooldown of cooldown_bars.
    """

    def __init__(self, config: StrategyConfig, seed: Optional[PositionState] = None):
        self.config = config
        self.state = replace(seed) if seed is not None else PositionState()

    def step(self, quiet: bool, burst: bool, breakout: int) -> List[str]:
        """Advance one bar. Returns the reasoning trail for this bar."""
        cfg = self.config
        st = self.state
        reasoning: List[str] = []
        if quiet:
            reasoning.append("quiet regime observed")
        if burst:
            reasoning.append("volatility burst detected")
        if breakout == 1:
            reasoning.append("donchian breakout long")
        elif breakout == -1:
            reasoning.append("donchian breakout short")

        if st.status == StrategyStatus.COOLDOWN:
            reasoning.append(f"cooldown {st.cooldown_remaining} bars remaining")

        if (
            st.status == StrategyStatus.FLAT
            and st.cooldown_remaining == 0
            and quiet
            and burst
            and breakout != 0
        ):
            st.status = StrategyStatus.LONG if breakout == 1 else StrategyStatus.SHORT
            st.direction = breakout
            st.bars_since_entry = 0
            reasoning.append("entered position")
            logger.debug("Entered %s", st.status.value)

        if st.in_position:
            st.bars_in_position = st.bars_since_entry + 1
            ramp = min(cfg.max_leverage, cfg.ramp_per_bar * st.bars_in_position)
            if st.bars_in_position >= cfg.hold_bars:
                st.status = StrategyStatus.COOLDOWN
                st.cooldown_remaining = cfg.cooldown_bars
                st.direction = 0
                st.bars_since_entry = 0
                st.target_leverage = 0.0
                st.bars_in_position = 0
                reasoning.append("exiting position into cooldown")
                logger.debug("Hold limit reached, cooldown for %d bars", cfg.cooldown_bars)
            else:
                st.target_leverage = ramp * st.direction
                st.bars_since_entry += 1
        else:
            st.target_leverage = 0.0
            st.bars_in_position = 0
            if st.status == StrategyStatus.COOLDOWN and st.cooldown_remaining > 0:
                st.cooldown_remaining -= 1
                if st.cooldown_remaining == 0:
                    st.status = StrategyStatus.FLAT
                    reasoning.append("cooldown finished")

        st.target_leverage = max(-cfg.max_leverage, min(cfg.max_leverage, st.target_leverage))
        return reasoning
