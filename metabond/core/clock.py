"""
Week clocks.

The ledger asks a clock for the current week before accepting a checkpoint.
Weeks are 1-based; week 0 means the program has not started yet.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from .types import Week

SECONDS_PER_WEEK = 7 * 24 * 60 * 60


class WeekClock(ABC):
    """Source of the current reward week."""

    @abstractmethod
    def current_week(self) -> Week:
        ...


@dataclass(frozen=True)
class FixedWeekClock(WeekClock):
    """
    Deterministic week source.

    In tests and replays the caller pins the week; advance() returns a new
    clock instead of mutating this one.
    """
    week: Week = 0

    def current_week(self) -> Week:
        return self.week

    def advance(self, step: int = 1) -> "FixedWeekClock":
        return FixedWeekClock(self.week + step)


class EpochWeekClock(WeekClock):
    """
    Wall-clock week source anchored at a genesis timestamp.

    week = (now - genesis_ts) // week_seconds + 1, or 0 before genesis.
    """

    def __init__(
        self,
        genesis_ts: int,
        week_seconds: int = SECONDS_PER_WEEK,
        now: Optional[Callable[[], float]] = None,
    ) -> None:
        if week_seconds <= 0:
            raise ValueError(f"week_seconds must be positive, got {week_seconds}")
        self.genesis_ts = int(genesis_ts)
        self.week_seconds = int(week_seconds)
        self._now = now or time.time

    def current_week(self) -> Week:
        elapsed = int(self._now()) - self.genesis_ts
        if elapsed < 0:
            return 0
        return elapsed // self.week_seconds + 1
