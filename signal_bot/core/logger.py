"""
Logging for the bot: the signal_bot logger to console and optional file,
with noisy client libraries held at WARNING and bot tokens masked.
"""

from __future__ import annotations
import logging
import re
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# python-binance and its socket/http stack log every frame and request at DEBUG/INFO
CHATTY_LOGGERS = ("binance", "websockets", "urllib3", "asyncio")

_BOT_TOKEN = re.compile(r"bot\d+:[A-Za-z0-9_-]+")


class RedactTokens(logging.Filter):
    """Mask Telegram bot tokens, which appear in sendMessage URLs."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _BOT_TOKEN.sub("bot***", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def quiet_libraries(names: Iterable[str] = CHATTY_LOGGERS, level: int = logging.WARNING) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the signal_bot logger. The file handler is added only when
    both log_dir and log_file are set. Safe to call more than once.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    bot_logger = logging.getLogger("signal_bot")
    bot_logger.setLevel(log_level)
    for handler in list(bot_logger.handlers):
        bot_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    redact = RedactTokens()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redact)
        bot_logger.addHandler(handler)

    quiet_libraries()
    return bot_logger
