"""Feeds: market data interfaces and Binance implementations."""

from signal_bot.feeds.base import HistoryProvider, CandleTransport
from signal_bot.feeds.binance_history import BinanceHistoryProvider
from signal_bot.feeds.binance_stream import BinanceKlineStream, parse_kline_message

__all__ = [
    "HistoryProvider",
    "CandleTransport",
    "BinanceHistoryProvider",
    "BinanceKlineStream",
    "parse_kline_message",
]
