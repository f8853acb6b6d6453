"""
Red candle run strategy as a state machine over closed candles.

BUY when the N-th consecutive red candle closes. While holding, SELL when the
close falls to the sell threshold drawdown (inclusive) or rises above entry.
The transition is a pure function; SignalStateMachine just keeps the state.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from signal_bot.core.errors import ThresholdNotArmed
from signal_bot.core.types import Candle, Phase, SignalSide, SignalState, Transaction

logger = logging.getLogger("signal_bot.strategies.red_candle")


def should_sell(close: float, entry: float, sell_threshold: float) -> bool:
    """Drawdown reached the threshold, or price is above entry."""
    return close <= entry * (100 - sell_threshold) / 100 or close > entry


def transition(
    state: SignalState,
    candle: Candle,
    run_length: int,
    symbol: str = "",
) -> Tuple[SignalState, List[Transaction]]:
    """
    Apply one closed candle. Returns the new state and the signals to record, SELL before BUY.
    The sell check uses the position held before this candle, so a position
    opened here is not checked until the next close.
    """
    if state.sell_threshold is None:
        raise ThresholdNotArmed("Sell threshold not set; refusing to process candles")

    red_count = state.red_count + 1 if candle.is_red else 0
    buy_due = red_count == run_length
    if buy_due:
        red_count = 0

    prior = state.open_position
    position = prior
    signals: List[Transaction] = []

    if prior is not None and should_sell(candle.close, prior, state.sell_threshold):
        signals.append(Transaction(
            side=SignalSide.SELL,
            price=candle.close,
            timestamp=candle.close_time,
            symbol=symbol,
            profit_loss_pct=(candle.close - prior) / prior * 100,
        ))
        position = None

    if buy_due:
        if position is None:
            signals.append(Transaction(
                side=SignalSide.BUY,
                price=candle.close,
                timestamp=candle.close_time,
                symbol=symbol,
            ))
            position = candle.close
        else:
            logger.info("Red run complete at %s but position open at %s, no buy", candle.close, position)

    return replace(state, red_count=red_count, open_position=position), signals


class SignalStateMachine:
    """Holds SignalState for one instrument and feeds it closed candles."""

    def __init__(self, run_length: int, symbol: str = "", sell_threshold: Optional[float] = None):
        if run_length < 1:
            raise ValueError(f"run_length must be >= 1, got {run_length}")
        self.run_length = run_length
        self.symbol = symbol
        self._state = SignalState(sell_threshold=sell_threshold)

    @property
    def state(self) -> SignalState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def armed(self) -> bool:
        return self._state.sell_threshold is not None

    def arm(self, sell_threshold: float) -> None:
        self._state = replace(self._state, sell_threshold=sell_threshold)

    def on_candle_closed(self, candle: Candle) -> List[Transaction]:
        self._state, signals = transition(self._state, candle, self.run_length, self.symbol)
        return signals
