"""Risk: trade planning against the notional cap and lot filters."""

from vol_regime_bot.risk.manager import RiskManager

__all__ = ["RiskManager"]
