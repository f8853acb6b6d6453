"""Timeframe string to minutes conversion."""

def timeframe_minutes(tf: str) -> int:
    """Convert Binance-style interval (e.g. '5m', '1h', '1d', '1w', '1M') to minutes."""
    tf = tf.strip()
    if len(tf) < 2 or not tf[:-1].isdigit() or int(tf[:-1]) <= 0:
        raise ValueError(f"Unsupported timeframe: {tf}")
    count, unit = int(tf[:-1]), tf[-1]
    if unit == "M":  # month, Binance uses uppercase
        return count * 60 * 24 * 30
    unit = unit.lower()
    if unit == "m":
        return count
    if unit == "h":
        return count * 60
    if unit == "d":
        return count * 60 * 24
    if unit == "w":
        return count * 60 * 24 * 7
    raise ValueError(f"Unsupported timeframe: {tf}")
