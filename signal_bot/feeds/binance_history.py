"""
Historical klines from Binance spot REST with retry and rate-limit handling.
"""

from __future__ import annotations
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pandas as pd
import requests

from binance.client import Client
from binance.exceptions import BinanceAPIException, BinanceRequestException

from signal_bot.core.errors import TransportFailure
from signal_bot.core.types import Candle
from signal_bot.feeds.base import HistoryProvider

logger = logging.getLogger("signal_bot.feeds.history")

KLINE_COLUMNS = [
    "open_time", "open", "high", "low", "close", "volume",
    "close_time", "quote_av", "num_trades", "tb_base_av", "tb_quote_av", "ignore",
]


def retry_on_rate_limit(max_retries: int = 3, base_delay: float = 1.0):
    """Decorator: retry on 429 or 418 (rate limit)."""
    def decorator(f):
        def wrapped(*args, **kwargs):
            last_exc = None
            for attempt in range(max_retries):
                try:
                    return f(*args, **kwargs)
                except BinanceAPIException as e:
                    last_exc = e
                    if e.status_code in (429, 418) and attempt < max_retries - 1:
                        delay = base_delay * (2 ** attempt)
                        logger.warning("Rate limited, retry in %.1fs (attempt %d)", delay, attempt + 1)
                        time.sleep(delay)
                    else:
                        raise
            raise last_exc
        return wrapped
    return decorator


def klines_to_frame(raw: list) -> pd.DataFrame:
    """Raw kline rows to a typed OHLCV frame with UTC open/close times."""
    df = pd.DataFrame(raw, columns=KLINE_COLUMNS)
    df[["open", "high", "low", "close", "volume"]] = df[["open", "high", "low", "close", "volume"]].astype(float)
    df["open_time"] = pd.to_datetime(df["open_time"], unit="ms", utc=True)
    df["close_time"] = pd.to_datetime(df["close_time"], unit="ms", utc=True)
    df = df.drop_duplicates(subset="open_time").sort_values("open_time", ignore_index=True)
    return df[["open_time", "open", "high", "low", "close", "volume", "close_time"]]


def frame_to_candles(df: pd.DataFrame) -> List[Candle]:
    return [
        Candle(
            open_time=row.open_time.to_pydatetime(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
            close_time=row.close_time.to_pydatetime(),
        )
        for row in df.itertuples(index=False)
    ]


class BinanceHistoryProvider(HistoryProvider):
    """Spot klines over a lookback window. Keys are optional for public market data."""

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        lookback_days: int = 365,
        client: Optional[Client] = None,
    ):
        self._api_key = api_key or None
        self._api_secret = api_secret or None
        self.lookback_days = lookback_days
        self._client = client

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = Client(self._api_key, self._api_secret)
        return self._client

    @retry_on_rate_limit(max_retries=3, base_delay=1.0)
    def _fetch_raw(self, symbol: str, interval: str, start_ms: int) -> list:
        # python-binance pages through 1000-kline batches itself
        return self._get_client().get_historical_klines(symbol, interval, start_str=start_ms, limit=1000)

    def fetch_history(self, symbol: str, interval: str) -> List[Candle]:
        start = datetime.now(timezone.utc) - timedelta(days=self.lookback_days)
        start_ms = int(start.timestamp() * 1000)
        try:
            raw = self._fetch_raw(symbol.upper(), interval, start_ms)
        except (BinanceAPIException, BinanceRequestException, requests.RequestException) as e:
            raise TransportFailure(f"History fetch failed for {symbol} {interval}: {e}") from e
        candles = frame_to_candles(klines_to_frame(raw))
        logger.info("Fetched %d %s candles for %s since %s", len(candles), interval, symbol.upper(), start.date())
        return candles
