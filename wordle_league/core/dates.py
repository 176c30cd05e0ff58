#!/usr/bin/python
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, date, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

@dataclass(frozen=True)
class DatesConfig:
    # Local date format string used across the project (for parsing CATCHUP_SINCE, etc.)
    date_format: str = "%Y-%m-%d"
    # The epoch local date that maps to base_number (default aligns with Wordle)
    epoch_date: date = date(2021, 6, 19)
    # The puzzle number at the epoch_date (Wordle starts at 0)
    base_number: int = 0
    # The group summary is posted the morning after, so it reports the previous day
    summary_lag_days: int = 1

class GameDates:
    """
    Maps timestamps to local result dates and daily puzzle numbers:
    - puzzle number = base_number + days_since(epoch_date)
    - result date = local date of the summary message minus summary_lag_days
    """
    def __init__(self, config: DatesConfig | None = None, tz: str = "UTC"):
        self.config = config or DatesConfig()
        self.tz = ZoneInfo(tz)

    @property
    def date_format(self) -> str:
        return self.config.date_format

    def to_local_date(self, ts: Optional[datetime] = None) -> date:
        """
        Convert a timestamp to the local date in the configured time zone.
        Naive timestamps are treated as UTC (Discord reports UTC).
        """
        if ts is None:
            return datetime.now(self.tz).date()
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts.astimezone(self.tz).date()

    def results_date(self, ts: Optional[datetime] = None) -> date:
        return self.to_local_date(ts) - timedelta(days=self.config.summary_lag_days)

    def date_to_num(self, d: date) -> int:
        delta_days = (d - self.config.epoch_date).days
        return self.config.base_number + max(0, delta_days)

    def parse_date(self, value: str) -> datetime:
        """CATCHUP_SINCE-style string -> aware datetime at local midnight."""
        return datetime.strptime(value, self.date_format).replace(tzinfo=self.tz)
