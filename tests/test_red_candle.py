"""Unit tests for strategies.red_candle."""

from datetime import datetime, timedelta, timezone

import pytest
from signal_bot.core.errors import InsufficientHistory, ThresholdNotArmed
from signal_bot.core.types import Candle, Phase, SignalSide, SignalState
from signal_bot.strategies.red_candle import SignalStateMachine, should_sell, transition

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def candle(o, c, i=0):
    start = T0 + timedelta(hours=i)
    return Candle(start, o, max(o, c), min(o, c), c, 1.0, start + timedelta(hours=1))


def test_n_reds_emit_one_buy_and_reset():
    sm = SignalStateMachine(3, symbol="BTCUSDT", sell_threshold=10.0)
    assert sm.on_candle_closed(candle(100, 99, 0)) == []
    assert sm.phase == Phase.ARMED
    assert sm.on_candle_closed(candle(99, 98, 1)) == []
    signals = sm.on_candle_closed(candle(98, 97, 2))
    assert len(signals) == 1
    buy = signals[0]
    assert buy.side == SignalSide.BUY
    assert buy.price == 97
    assert buy.symbol == "BTCUSDT"
    assert buy.timestamp == T0 + timedelta(hours=3)
    assert sm.state.red_count == 0
    assert sm.state.open_position == 97
    assert sm.phase == Phase.HOLDING


def test_green_resets_counter():
    sm = SignalStateMachine(3, sell_threshold=10.0)
    sm.on_candle_closed(candle(100, 99, 0))
    sm.on_candle_closed(candle(99, 98, 1))
    sm.on_candle_closed(candle(98, 98, 2))  # close == open is green
    assert sm.state.red_count == 0
    assert sm.phase == Phase.IDLE
    assert sm.on_candle_closed(candle(98, 97, 3)) == []


def test_run_longer_than_n_does_not_refire():
    sm = SignalStateMachine(2, sell_threshold=50.0)
    out = []
    for i, (o, c) in enumerate([(100, 99), (99, 98), (98, 97)]):
        out.extend(sm.on_candle_closed(candle(o, c, i)))
    assert [t.side for t in out] == [SignalSide.BUY]
    assert sm.state.red_count == 1


def holding(entry=100.0, threshold=10.0):
    return SignalState(red_count=0, open_position=entry, sell_threshold=threshold)


@pytest.mark.parametrize("close", [90.0, 89.9])
def test_drawdown_at_or_past_threshold_sells(close):
    state, signals = transition(holding(), candle(95, close), 3)
    assert [t.side for t in signals] == [SignalSide.SELL]
    assert signals[0].price == close
    assert signals[0].profit_loss_pct == pytest.approx((close - 100) / 100 * 100)
    assert state.open_position is None


def test_drawdown_short_of_threshold_holds():
    state, signals = transition(holding(), candle(95, 90.1), 3)
    assert signals == []
    assert state.open_position == 100.0


def test_close_above_entry_sells():
    state, signals = transition(holding(), candle(100.5, 101), 3)
    assert len(signals) == 1
    assert signals[0].side == SignalSide.SELL
    assert signals[0].profit_loss_pct == pytest.approx(1.0)
    assert state.phase == Phase.IDLE


def test_close_at_entry_holds():
    assert not should_sell(100.0, 100.0, 10.0)
    _, signals = transition(holding(), candle(99, 100), 3)
    assert signals == []


def test_new_position_not_checked_on_opening_candle():
    # threshold 0 would sell on any close at or below entry
    sm = SignalStateMachine(1, sell_threshold=0.0)
    signals = sm.on_candle_closed(candle(100, 95))
    assert [t.side for t in signals] == [SignalSide.BUY]
    assert sm.state.open_position == 95


def test_sell_and_buy_on_same_candle():
    state = SignalState(red_count=1, open_position=100.0, sell_threshold=10.0)
    state, signals = transition(state, candle(92, 85), 2)
    assert [t.side for t in signals] == [SignalSide.SELL, SignalSide.BUY]
    assert signals[0].profit_loss_pct == pytest.approx(-15.0)
    assert state.open_position == 85
    assert state.red_count == 0


def test_buy_suppressed_while_holding():
    state = SignalState(red_count=1, open_position=100.0, sell_threshold=10.0)
    state, signals = transition(state, candle(97, 95), 2)
    assert signals == []
    assert state.open_position == 100.0
    assert state.red_count == 0


def test_unarmed_threshold_refuses():
    sm = SignalStateMachine(1)
    assert not sm.armed
    with pytest.raises(ThresholdNotArmed):
        sm.on_candle_closed(candle(100, 90))
    assert sm.state == SignalState()
    assert issubclass(ThresholdNotArmed, InsufficientHistory)


def test_arm_keeps_counter_and_position():
    sm = SignalStateMachine(2)
    sm.arm(12.5)
    assert sm.armed
    assert sm.state.sell_threshold == 12.5
    assert sm.phase == Phase.IDLE


def test_invalid_run_length():
    with pytest.raises(ValueError):
        SignalStateMachine(0)
