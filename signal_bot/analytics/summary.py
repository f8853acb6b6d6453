"""
Trade summary over a slice of the ledger: counts, average prices, average P/L.
Averages over nothing are 0.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from signal_bot.core.types import SignalSide, Transaction


@dataclass
class TradeSummary:
    """Aggregate of buy/sell signals."""
    total_buys: int
    total_sells: int
    buy_average_price: float
    sell_average_price: float
    average_profit_loss: float


def summarize(transactions: Iterable[Transaction]) -> TradeSummary:
    """Aggregate signals. P/L is the mean of each SELL's stored profit_loss_pct."""
    buys = []
    sells = []
    pnls = []
    for t in transactions:
        if t.side == SignalSide.BUY:
            buys.append(t.price)
        else:
            sells.append(t.price)
            if t.profit_loss_pct is not None:
                pnls.append(t.profit_loss_pct)
    return TradeSummary(
        total_buys=len(buys),
        total_sells=len(sells),
        buy_average_price=sum(buys) / len(buys) if buys else 0.0,
        sell_average_price=sum(sells) / len(sells) if sells else 0.0,
        average_profit_loss=sum(pnls) / len(pnls) if pnls else 0.0,
    )


def format_summary(symbol: str, summary: TradeSummary) -> str:
    return "\n".join([
        f"Trading Pair: {symbol}",
        f"Total Buys: {summary.total_buys}",
        f"Total Sells: {summary.total_sells}",
        f"Buy Average Price: {summary.buy_average_price:.8g}",
        f"Sell Average Price: {summary.sell_average_price:.8g}",
        f"Average Profit/Loss: {summary.average_profit_loss:.2f}%",
    ])
