"""
Signal bot: threshold from history, red candle signals from the live stream,
ledger of signals, and a summary every summary_ticker closed candles.
"""

from __future__ import annotations
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from signal_bot.analytics.ledger import TransactionLedger
from signal_bot.analytics.summary import format_summary, summarize
from signal_bot.core.config import Config
from signal_bot.core.errors import DeliveryError
from signal_bot.core.types import Candle, CandleUpdate, SignalSide, Transaction
from signal_bot.feeds.base import CandleTransport, HistoryProvider
from signal_bot.strategies.red_candle import SignalStateMachine
from signal_bot.strategies.threshold import calculate_sell_threshold
from signal_bot.utils.telegram import Notifier

logger = logging.getLogger("signal_bot.bot")


def signal_message(t: Transaction) -> str:
    if t.side == SignalSide.BUY:
        return f"Buy Signal Triggered for {t.symbol} at {t.price}"
    return f"Sell Signal Triggered for {t.symbol} at {t.price}. Profit/Loss: {t.profit_loss_pct:.2f}%"


class SignalBot:
    """Wires history, state machine, ledger, and notifier for one symbol."""

    def __init__(
        self,
        config: Config,
        history: HistoryProvider,
        transport: CandleTransport,
        notifier: Notifier,
        ledger: Optional[TransactionLedger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.history = history
        self.transport = transport
        self.notifier = notifier
        self.ledger = ledger if ledger is not None else TransactionLedger()
        self.machine = SignalStateMachine(config.consecutive_red_candles, symbol=config.symbol)
        self.day_ticker = config.summary_ticker
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tz = config.tz()
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._consumer: Optional[asyncio.Task] = None
        self._stopping = False

    @property
    def sell_threshold(self) -> Optional[float]:
        return self.machine.state.sell_threshold

    def arm(self, candles: Sequence[Candle]) -> float:
        """Compute the threshold from history and arm the state machine. Raises InsufficientHistory."""
        threshold = calculate_sell_threshold(candles, self.config.consecutive_red_candles)
        self.machine.arm(threshold)
        logger.info("Sell threshold set at %.4f%% to trigger sell signal after backtesting", threshold)
        return threshold

    async def start(self) -> float:
        candles = await asyncio.to_thread(self.history.fetch_history, self.config.symbol, self.config.interval)
        threshold = self.arm(candles)
        logger.info("Monitoring prices for %s (%s)", self.config.symbol, self.config.interval)
        self._outbox.put_nowait(f"Crypto Bot monitoring prices for {self.config.symbol}")
        return threshold

    def handle_update(self, update: CandleUpdate) -> List[str]:
        """Process one live update. Returns the messages to send, in order."""
        if not update.is_closed:
            return []
        if update.symbol and update.symbol != self.config.symbol:
            logger.debug("Ignoring update for %s", update.symbol)
            return []
        if update.interval and update.interval != self.config.interval:
            logger.debug("Ignoring %s update for %s", update.interval, update.symbol)
            return []
        messages = []
        for t in self.machine.on_candle_closed(update.candle):
            self.ledger.append(t)
            logger.info("%s signal for %s at %s", t.side.value, t.symbol, t.price)
            messages.append(signal_message(t))
        self.day_ticker -= 1
        if self.day_ticker <= 0:
            messages.append(self.daily_summary(update.candle.close_time))
            self.day_ticker = self.config.summary_ticker
        return messages

    def daily_summary(self, as_of: Optional[datetime] = None) -> str:
        """
        Summary message for one calendar day of the ledger in the reference time zone.
        as_of is the close time of the candle that triggered it, so a day candle
        arriving just after midnight still reports its own day. Defaults to now.
        """
        today = (as_of or self._clock()).astimezone(self._tz).date()
        summary = summarize(self.ledger.filter_by_date(today, self._tz))
        logger.info(
            "Summary %s: buys=%d sells=%d avg P/L=%.2f%%",
            today, summary.total_buys, summary.total_sells, summary.average_profit_loss,
        )
        return format_summary(self.config.symbol, summary)

    async def run(self) -> None:
        """Start, then consume the stream until stop() or the transport gives up."""
        await self.start()
        if self._stopping:
            return
        sender = asyncio.create_task(self._send_loop())
        self._consumer = asyncio.create_task(self._consume())
        try:
            await self._consumer
        except asyncio.CancelledError:
            if not self._stopping:
                raise
            logger.info("Event intake stopped")
        finally:
            await self._drain(sender)

    def stop(self) -> None:
        self._stopping = True
        if self._consumer is not None:
            self._consumer.cancel()

    async def _consume(self) -> None:
        async for update in self.transport.stream(self.config.symbol, self.config.interval):
            for message in self.handle_update(update):
                self._outbox.put_nowait(message)

    async def _send_loop(self) -> None:
        while True:
            message = await self._outbox.get()
            try:
                await asyncio.to_thread(self._deliver, message)
            except Exception as e:
                logger.exception("Notifier error: %s", e)
            finally:
                self._outbox.task_done()

    def _deliver(self, message: str) -> None:
        try:
            self.notifier.notify(self.config.telegram_chat_id, message)
        except DeliveryError as e:
            logger.warning("Notification not delivered: %s", e)

    async def _drain(self, sender: asyncio.Task, timeout: float = 5.0) -> None:
        """Give queued notifications a short grace period, then drop the rest."""
        try:
            await asyncio.wait_for(self._outbox.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Dropping %d undelivered notifications", self._outbox.qsize())
        finally:
            sender.cancel()
