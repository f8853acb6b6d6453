"""
Load configuration from config.yaml and .env. Secrets only from env.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

from signal_bot.core.errors import ConfigError
from signal_bot.utils.timeframes import timeframe_minutes


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns a validated Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_int(key: str, default: int = 0) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return int(default)
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{key} must be an integer, got {raw!r}")

    market = data.get("market", {})
    strategy = data.get("strategy", {})
    summary = data.get("summary", {})
    telegram = data.get("telegram", {})
    logging_cfg = data.get("logging", {})

    config = Config(
        # Binance keys are optional; public market data needs none
        binance_api_key=env("BINANCE_API_KEY"),
        binance_api_secret=env("BINANCE_API_SECRET"),
        symbol=env("SYMBOL", str(market.get("symbol", "BTCUSDT"))).upper(),
        interval=env("INTERVAL", str(market.get("interval", "1h"))),
        consecutive_red_candles=env_int("CONSECUTIVE_RED_CANDLES", strategy.get("consecutive_red_candles", 3)),
        summary_ticker=env_int("SUMMARY_TICKER", strategy.get("summary_ticker", 0)),  # 0 = one day of candles
        history_days=env_int("HISTORY_DAYS", strategy.get("history_days", 365)),
        summary_timezone=env("SUMMARY_TIMEZONE", str(summary.get("timezone", "UTC"))),
        telegram_bot_token=env("TELEGRAM_BOT_TOKEN", str(telegram.get("bot_token", "") or "")),
        telegram_chat_id=env("TELEGRAM_CHAT_ID", str(telegram.get("chat_id", "") or "")),
        log_level=env("LOG_LEVEL", str(logging_cfg.get("level", "INFO"))),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "signal_bot.log"),
    )
    config.validate()
    return config


class Config:
    """Unified configuration. Treat as immutable after load."""

    __slots__ = (
        "binance_api_key", "binance_api_secret", "symbol", "interval",
        "consecutive_red_candles", "summary_ticker", "history_days", "summary_timezone",
        "telegram_bot_token", "telegram_chat_id",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        binance_api_key: str = "",
        binance_api_secret: str = "",
        symbol: str = "BTCUSDT",
        interval: str = "1h",
        consecutive_red_candles: int = 3,
        summary_ticker: int = 0,
        history_days: int = 365,
        summary_timezone: str = "UTC",
        telegram_bot_token: str = "",
        telegram_chat_id: str = "",
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "signal_bot.log",
    ):
        self.binance_api_key = binance_api_key
        self.binance_api_secret = binance_api_secret
        self.symbol = symbol
        self.interval = interval
        self.consecutive_red_candles = consecutive_red_candles
        self.summary_ticker = summary_ticker
        self.history_days = history_days
        self.summary_timezone = summary_timezone
        self.telegram_bot_token = telegram_bot_token
        self.telegram_chat_id = telegram_chat_id
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file

    def validate(self) -> None:
        """Check value ranges; fill in the summary ticker from the interval when unset."""
        if not self.symbol:
            raise ConfigError("symbol must not be empty")
        try:
            minutes = timeframe_minutes(self.interval)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if self.consecutive_red_candles < 1:
            raise ConfigError(f"consecutive_red_candles must be >= 1, got {self.consecutive_red_candles}")
        if self.summary_ticker < 0:
            raise ConfigError(f"summary_ticker must be >= 1, got {self.summary_ticker}")
        if self.summary_ticker == 0:
            self.summary_ticker = max(1, 24 * 60 // minutes)
        if self.history_days < 1:
            raise ConfigError(f"history_days must be >= 1, got {self.history_days}")
        self.tz()

    def tz(self) -> ZoneInfo:
        """Reference time zone for calendar-day summaries."""
        try:
            return ZoneInfo(self.summary_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown summary timezone: {self.summary_timezone}") from e
