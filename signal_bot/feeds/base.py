"""Abstract market data interfaces: history and live candle stream."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import AsyncIterator, List

from signal_bot.core.types import Candle, CandleUpdate


class HistoryProvider(ABC):
    """Source of past candles for one symbol and interval."""

    @abstractmethod
    def fetch_history(self, symbol: str, interval: str) -> List[Candle]:
        """Return candles sorted ascending by open_time. Raises TransportFailure."""
        pass


class CandleTransport(ABC):
    """Live candle updates, closed and in-progress."""

    @abstractmethod
    def stream(self, symbol: str, interval: str) -> AsyncIterator[CandleUpdate]:
        """Async iterator of updates in arrival order. Raises TransportFailure when it gives up."""
        pass
