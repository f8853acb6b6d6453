"""
Sell threshold from history: median percentage loss over runs of
consecutive red candles at least run_length long.
"""

from __future__ import annotations
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from signal_bot.core.errors import InsufficientHistory
from signal_bot.core.types import Candle


def red_runs(candles: Sequence[Candle], run_length: int) -> Iterator[Tuple[int, int]]:
    """Yield (start, end) indices of maximal red runs with at least run_length candles."""
    streak = 0
    for i, candle in enumerate(candles):
        if candle.is_red:
            streak += 1
            continue
        if streak >= run_length:
            yield i - streak, i - 1
        streak = 0
    # A run still open at the end of history counts as finished
    if streak >= run_length:
        yield len(candles) - streak, len(candles) - 1


def run_losses(candles: Sequence[Candle], run_length: int) -> List[float]:
    """Percentage loss from the first open to the last close of each qualifying run."""
    losses = []
    for start, end in red_runs(candles, run_length):
        first_open = candles[start].open
        losses.append((first_open - candles[end].close) / first_open * 100)
    return losses


def calculate_sell_threshold(candles: Sequence[Candle], run_length: int) -> float:
    """
    Median run loss in percent. Even-sized samples average the two central values.
    Raises InsufficientHistory when there is nothing to take a median of.
    """
    if run_length < 1:
        raise ValueError(f"run_length must be >= 1, got {run_length}")
    if len(candles) < run_length:
        raise InsufficientHistory(
            f"{len(candles)} candles is fewer than the run length {run_length}"
        )
    losses = run_losses(candles, run_length)
    if not losses:
        raise InsufficientHistory(
            f"No run of {run_length}+ red candles in {len(candles)} candles"
        )
    return float(np.median(np.asarray(losses, dtype=float)))
