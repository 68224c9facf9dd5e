#!/usr/bin/python
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, date
from typing import Optional

@dataclass(frozen=True)
class DatesConfig:
    # The epoch local date that maps to base_number (default aligns with Wordle)
    epoch_date: date = date(2021, 6, 19)
    # The puzzle number at the epoch_date (Wordle starts at 0)
    base_number: int = 0

class GameDates:
    """
    Maps calendar days to a game's daily puzzle numbers:
    base_number + days_since(epoch_date).
    Each game plugin carries its own instance; the defaults match Wordle.
    """
    def __init__(self, config: DatesConfig | None = None):
        self.config = config or DatesConfig()

    def _to_local_date(self, ts: Optional[datetime] = None) -> date:
        """
        Convert a timestamp to the local date (naive date used for daily numbering).
        If ts is None, use now() in local timezone.
        """
        if ts is None:
            return datetime.now().astimezone().date()
        # If timestamp is timezone-aware, convert to local timezone first
        if ts.tzinfo is not None:
            return ts.astimezone().date()
        # If naive, assume it’s local
        return ts.date()

    def day_to_num(self, d: date) -> int:
        """Puzzle number published on calendar day d (never below base_number)."""
        delta_days = (d - self.config.epoch_date).days
        return self.config.base_number + max(0, delta_days)

    def date_to_num(self, ts: Optional[datetime] = None) -> int:
        """Map a timestamp (or now if None) to a puzzle number."""
        return self.day_to_num(self._to_local_date(ts))

    def today_num(self) -> int:
        return self.date_to_num(None)
