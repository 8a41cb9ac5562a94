"""Utilities for resolving the trailing accounting window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Final, Protocol

DEFAULT_WINDOW_DAYS: Final[int] = 30


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TimeWindow:
    """A window of ``lookback`` ending at the clock's current instant."""

    lookback: timedelta

    def resolve(self, *, clock: Clock = utcnow) -> tuple[datetime, datetime]:
        """Resolve the window into concrete UTC timestamps."""

        if self.lookback < timedelta(0):
            raise ValueError("Lookback duration must be non-negative")
        anchor = clock()
        if anchor.tzinfo is None:
            anchor = anchor.replace(tzinfo=UTC)
        anchor = anchor.astimezone(UTC)
        return anchor - self.lookback, anchor


def trailing_window_start(window: timedelta, *, clock: Clock = utcnow) -> datetime:
    """Return the oldest instant still inside a trailing window ending now."""

    start, _ = TimeWindow(lookback=window).resolve(clock=clock)
    return start


__all__ = ["DEFAULT_WINDOW_DAYS", "Clock", "TimeWindow", "trailing_window_start", "utcnow"]
