#!/usr/bin/env python3
"""
Signal Bot CLI: live | threshold
Usage:
  python main.py live [--config config.yaml]
  python main.py threshold [--config config.yaml]
"""

from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from signal_bot.bot import SignalBot
from signal_bot.core.config import load_config
from signal_bot.core.errors import DeliveryError, InsufficientHistory, TransportFailure
from signal_bot.core.logger import setup_logging
from signal_bot.feeds.binance_history import BinanceHistoryProvider
from signal_bot.feeds.binance_stream import BinanceKlineStream
from signal_bot.strategies.threshold import calculate_sell_threshold, red_runs
from signal_bot.utils.telegram import TelegramNotifier

logger = logging.getLogger("signal_bot")


def run_threshold(config_path: Path | None) -> int:
    """Fetch history and report the sell threshold without subscribing."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    provider = BinanceHistoryProvider(
        config.binance_api_key,
        config.binance_api_secret,
        lookback_days=config.history_days,
    )
    try:
        candles = provider.fetch_history(config.symbol, config.interval)
        threshold = calculate_sell_threshold(candles, config.consecutive_red_candles)
    except (InsufficientHistory, TransportFailure) as e:
        logger.error("No threshold available: %s", e)
        return 1
    runs = sum(1 for _ in red_runs(candles, config.consecutive_red_candles))
    print("\n--- Sell Threshold ---")
    print(f"Symbol: {config.symbol} ({config.interval}, {config.history_days} days)")
    print(f"Candles: {len(candles)}")
    print(f"Runs of {config.consecutive_red_candles}+ red candles: {runs}")
    print(f"Sell threshold: {threshold:.4f}%")
    return 0


def run_live(config_path: Path | None) -> int:
    """Run the signal bot until interrupted."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    notifier = TelegramNotifier(config.telegram_bot_token)
    if not notifier.configured or not config.telegram_chat_id:
        logger.warning("Telegram not configured; signals will only be logged")
    bot = SignalBot(
        config,
        history=BinanceHistoryProvider(
            config.binance_api_key,
            config.binance_api_secret,
            lookback_days=config.history_days,
        ),
        transport=BinanceKlineStream(config.binance_api_key, config.binance_api_secret),
        notifier=notifier,
    )
    try:
        asyncio.run(bot.run())
    except KeyboardInterrupt:
        logger.info("Shutdown by user")
        try:
            notifier.notify(config.telegram_chat_id, "Crypto Bot stopped (user request).")
        except DeliveryError as e:
            logger.warning("Notification not delivered: %s", e)
    except (InsufficientHistory, TransportFailure) as e:
        logger.error("Bot stopped: %s", e)
        return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Signal Bot CLI")
    parser.add_argument("mode", choices=["live", "threshold"], help="Run the bot or report the sell threshold")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    args = parser.parse_args()
    if args.mode == "threshold":
        return run_threshold(args.config)
    return run_live(args.config)


if __name__ == "__main__":
    exit(main())
