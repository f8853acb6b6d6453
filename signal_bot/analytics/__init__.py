"""Analytics: transaction ledger and trade summaries."""

from signal_bot.analytics.ledger import TransactionLedger
from signal_bot.analytics.summary import TradeSummary, summarize, format_summary

__all__ = ["TransactionLedger", "TradeSummary", "summarize", "format_summary"]
