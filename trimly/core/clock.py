"""Clock abstraction so "today" and timestamps can be pinned in tests."""

from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime:
        """Current naive UTC timestamp, used for created/updated/cancelled stamps."""
        ...

    def local_now(self) -> datetime:
        """Current wall-clock time at the shop."""
        ...

    def today(self) -> date:
        ...


class SystemClock:
    def __init__(self, timezone: str):
        self._tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.utcnow()

    def local_now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.local_now().date()
