"""
Live klines from the Binance spot websocket, reconnecting with exponential backoff.
"""

from __future__ import annotations
import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from binance import AsyncClient, BinanceSocketManager

from signal_bot.core.errors import TransportFailure
from signal_bot.core.types import Candle, CandleUpdate
from signal_bot.feeds.base import CandleTransport

logger = logging.getLogger("signal_bot.feeds.stream")


def _ms_to_dt(ms: int) -> datetime:
    return datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)


def parse_kline_message(msg: dict) -> Optional[CandleUpdate]:
    """Kline event payload to CandleUpdate. Returns None for anything that is not a kline."""
    if msg.get("e") != "kline" or "k" not in msg:
        return None
    k = msg["k"]
    candle = Candle(
        open_time=_ms_to_dt(k["t"]),
        open=float(k["o"]),
        high=float(k["h"]),
        low=float(k["l"]),
        close=float(k["c"]),
        volume=float(k["v"]),
        close_time=_ms_to_dt(k["T"]),
    )
    return CandleUpdate(
        symbol=str(k.get("s", msg.get("s", ""))).upper(),
        interval=str(k.get("i", "")),
        is_closed=bool(k.get("x", False)),
        candle=candle,
    )


class BinanceKlineStream(CandleTransport):
    """Kline socket for one symbol/interval via python-binance."""

    RECONNECT_BASE_DELAY = 1.0
    RECONNECT_MAX_DELAY = 60.0
    RECONNECT_MULTIPLIER = 2.0
    MAX_RECONNECT_ATTEMPTS = 10

    def __init__(self, api_key: str = "", api_secret: str = ""):
        self._api_key = api_key or None
        self._api_secret = api_secret or None

    async def stream(self, symbol: str, interval: str) -> AsyncIterator[CandleUpdate]:
        attempts = 0
        delay = self.RECONNECT_BASE_DELAY
        while True:
            try:
                client = await AsyncClient.create(self._api_key, self._api_secret)
                try:
                    bsm = BinanceSocketManager(client)
                    async with bsm.kline_socket(symbol.upper(), interval=interval) as socket:
                        if attempts > 0:
                            logger.info("Kline stream reconnected after %d attempts", attempts)
                        else:
                            logger.info("Kline stream connected: %s@%s", symbol.upper(), interval)
                        attempts = 0
                        delay = self.RECONNECT_BASE_DELAY
                        while True:
                            msg = await socket.recv()
                            if msg.get("e") == "error":
                                raise TransportFailure(f"Socket error: {msg.get('m', msg)}")
                            update = parse_kline_message(msg)
                            if update is not None:
                                yield update
                finally:
                    await client.close_connection()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                attempts += 1
                if attempts >= self.MAX_RECONNECT_ATTEMPTS:
                    logger.error("Max reconnect attempts (%d) reached, giving up", self.MAX_RECONNECT_ATTEMPTS)
                    raise TransportFailure(f"Kline stream for {symbol} lost: {e}") from e
                logger.warning(
                    "Kline stream error: %s, reconnecting in %.1fs (attempt %d)",
                    e, delay, attempts,
                )
                await asyncio.sleep(delay)
                delay = min(delay * self.RECONNECT_MULTIPLIER, self.RECONNECT_MAX_DELAY)
