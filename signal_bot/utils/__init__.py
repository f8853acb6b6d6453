"""Utils: Telegram, timeframes."""

from signal_bot.utils.telegram import Notifier, TelegramNotifier
from signal_bot.utils.timeframes import timeframe_minutes

__all__ = ["Notifier", "TelegramNotifier", "timeframe_minutes"]
