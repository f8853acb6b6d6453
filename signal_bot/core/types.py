"""
Core data types for candles, signal state, and transactions.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SignalSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class Phase(str, Enum):
    """Where the signal state machine stands for one instrument."""
    IDLE = "IDLE"
    ARMED = "ARMED"
    HOLDING = "HOLDING"


@dataclass(frozen=True)
class Candle:
    """OHLCV candle. Times are timezone-aware (UTC)."""
    open_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: datetime

    @property
    def is_red(self) -> bool:
        return self.close < self.open


@dataclass(frozen=True)
class CandleUpdate:
    """One live kline event. is_closed is False while the interval is still forming."""
    symbol: str
    interval: str
    is_closed: bool
    candle: Candle


@dataclass(frozen=True)
class Transaction:
    """Ledger entry for an emitted signal. profit_loss_pct is set on SELL only."""
    side: SignalSide
    price: float
    timestamp: datetime
    symbol: str = ""
    profit_loss_pct: Optional[float] = None


@dataclass(frozen=True)
class SignalState:
    """Per-instrument state: red run counter, open position price, armed threshold."""
    red_count: int = 0
    open_position: Optional[float] = None
    sell_threshold: Optional[float] = None

    @property
    def phase(self) -> Phase:
        if self.open_position is not None:
            return Phase.HOLDING
        if self.red_count > 0:
            return Phase.ARMED
        return Phase.IDLE
