"""Unit tests for core.config."""

import pytest
from signal_bot.core.config import Config, load_config
from signal_bot.core.errors import ConfigError

ENV_KEYS = [
    "SYMBOL", "INTERVAL", "CONSECUTIVE_RED_CANDLES", "SUMMARY_TICKER", "HISTORY_DAYS",
    "SUMMARY_TIMEZONE", "BINANCE_API_KEY", "BINANCE_API_SECRET",
    "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # set then delete so values loaded from .env are removed again on teardown
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_defaults_without_files(tmp_path, clean_env):
    config = load_config(tmp_path / "missing.yaml", tmp_path)
    assert config.symbol == "BTCUSDT"
    assert config.interval == "1h"
    assert config.consecutive_red_candles == 3
    assert config.summary_ticker == 24  # one day of 1h candles
    assert config.history_days == 365


def test_yaml_and_env_override(tmp_path, clean_env):
    path = tmp_path / "config.yaml"
    path.write_text(
        "market:\n  symbol: ethusdt\n  interval: 4h\n"
        "strategy:\n  consecutive_red_candles: 4\n  summary_ticker: 2\n"
        "telegram:\n  chat_id: '42'\n",
        encoding="utf-8",
    )
    clean_env.setenv("CONSECUTIVE_RED_CANDLES", "5")
    config = load_config(path, tmp_path)
    assert config.symbol == "ETHUSDT"
    assert config.interval == "4h"
    assert config.consecutive_red_candles == 5
    assert config.summary_ticker == 2
    assert config.telegram_chat_id == "42"


def test_dotenv_loaded_from_project_root(tmp_path, clean_env):
    (tmp_path / ".env").write_text("SYMBOL=solusdt\n", encoding="utf-8")
    config = load_config(tmp_path / "missing.yaml", tmp_path)
    assert config.symbol == "SOLUSDT"


def test_summary_ticker_derived_from_interval():
    config = Config(interval="15m")
    config.validate()
    assert config.summary_ticker == 96
    config = Config(interval="1w")
    config.validate()
    assert config.summary_ticker == 1


@pytest.mark.parametrize("kwargs", [
    {"consecutive_red_candles": 0},
    {"summary_ticker": -1},
    {"interval": "1x"},
    {"history_days": 0},
    {"summary_timezone": "Not/AZone"},
    {"symbol": ""},
])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        Config(**kwargs).validate()


def test_bad_env_integer(tmp_path, clean_env):
    clean_env.setenv("CONSECUTIVE_RED_CANDLES", "three")
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml", tmp_path)
