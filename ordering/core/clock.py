"""
Ordering Service — Clock

The daily reset works on the restaurant's local calendar day, so the clock
carries a timezone. Tests pass a fixed clock instead.
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from ordering.core.config import get_settings

settings = get_settings()

DAY_MARKER_FORMAT = "%d/%m/%Y"


class Clock:
    def __init__(self, tz_name: str | None = None):
        self.tz = ZoneInfo(tz_name or settings.RESET_TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc).astimezone(self.tz)

    def day_marker(self) -> str:
        """Today's local date as DD/MM/YYYY."""
        return self.now().strftime(DAY_MARKER_FORMAT)


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)
