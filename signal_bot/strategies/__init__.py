"""Strategies: sell threshold from history and the red candle state machine."""

from signal_bot.strategies.threshold import calculate_sell_threshold, red_runs
from signal_bot.strategies.red_candle import SignalStateMachine, transition

__all__ = ["calculate_sell_threshold", "red_runs", "SignalStateMachine", "transition"]
