"""Append-only transaction ledger."""

from __future__ import annotations
import threading
from datetime import date, timezone, tzinfo
from typing import Iterator, List

from signal_bot.core.types import Transaction


class TransactionLedger:
    """
    In-memory record of emitted signals in insertion (chronological) order.
    Appends are serialized; reads return copies so they can run alongside appends.
    """

    def __init__(self):
        self._entries: List[Transaction] = []
        self._lock = threading.Lock()

    def append(self, transaction: Transaction) -> None:
        with self._lock:
            self._entries.append(transaction)

    def snapshot(self) -> List[Transaction]:
        with self._lock:
            return list(self._entries)

    def filter_by_date(self, day: date, tz: tzinfo = timezone.utc) -> List[Transaction]:
        """Transactions whose timestamp falls on day in the reference time zone."""
        return [t for t in self.snapshot() if t.timestamp.astimezone(tz).date() == day]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.snapshot())
