"""Timeframe string conversions."""

def timeframe_minutes(tf: str) -> int:
    """Convert Binance-style timeframe (e.g. '5m', '4h', '1d', '1w') to minutes."""
    tf = tf.strip().lower()
    if tf.endswith("m"):
        return int(tf[:-1])
    if tf.endswith("h"):
        return int(tf[:-1]) * 60
    if tf.endswith("d"):
        return int(tf[:-1]) * 60 * 24
    if tf.endswith("w"):
        return int(tf[:-1]) * 60 * 24 * 7
    raise ValueError(f"Unsupported timeframe: {tf}")


def interval_hours(tf: str) -> float:
    """Timeframe length in hours ('15m' -> 0.25)."""
    return timeframe_minutes(tf) / 60.0
