"""Telegram notifications. Never log token or chat_id."""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod

import requests

from signal_bot.core.errors import DeliveryError

logger = logging.getLogger("signal_bot.utils.telegram")


class Notifier(ABC):
    """Delivers operator messages."""

    @abstractmethod
    def notify(self, recipient: str, message: str) -> None:
        """Deliver message to recipient. Raises DeliveryError on failure."""
        pass


class TelegramNotifier(Notifier):
    """Deliver plain-text messages to a Telegram chat. The recipient is the chat id."""

    def __init__(self, bot_token: str = "", timeout: float = 10.0):
        self._bot_token = bot_token
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._bot_token)

    def notify(self, recipient: str, message: str) -> None:
        """Send message. Raises DeliveryError if Telegram is unreachable or rejects it."""
        if not self._bot_token or not recipient:
            logger.debug("Telegram not configured, skipping message (len=%d)", len(message))
            return
        url = f"https://api.telegram.org/bot{self._bot_token}/sendMessage"
        payload = {"chat_id": recipient, "text": message}
        try:
            r = requests.post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise DeliveryError(f"Telegram unreachable: {type(e).__name__}") from e
        if r.status_code != 200:
            raise DeliveryError(f"Telegram send failed: {r.status_code} {r.text[:200]}")
