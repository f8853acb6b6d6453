"""Core: config, types, errors, logging."""

from signal_bot.core.config import load_config, Config
from signal_bot.core.errors import (
    SignalBotError,
    ConfigError,
    InsufficientHistory,
    ThresholdNotArmed,
    TransportFailure,
    DeliveryError,
)
from signal_bot.core.types import Candle, CandleUpdate, Phase, SignalSide, SignalState, Transaction
from signal_bot.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "SignalBotError",
    "ConfigError",
    "InsufficientHistory",
    "ThresholdNotArmed",
    "TransportFailure",
    "DeliveryError",
    "Candle",
    "CandleUpdate",
    "Phase",
    "SignalSide",
    "SignalState",
    "Transaction",
    "setup_logging",
]
