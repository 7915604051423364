"""
Time source for operations that stamp records with the current date.
"""
from datetime import date
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date:
        ...


class SystemClock:
    """Wall clock."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock pinned to a given day. Use in tests and replays."""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day

    def __repr__(self) -> str:
        return f"<FixedClock(day={self.day.isoformat()})>"
