"""Utils: timeframes, exchange filters, audit log."""

from vol_regime_bot.utils.timeframes import timeframe_minutes, interval_hours
from vol_regime_bot.utils.audit_log import append_log

__all__ = ["timeframe_minutes", "interval_hours", "append_log"]
