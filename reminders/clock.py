from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from zoneinfo import ZoneInfoNotFoundError

from config.defaults import DEFAULT_TIMEZONE


def resolve_timezone(timezone_name: str | None) -> tuple[ZoneInfo, str | None]:
    """
    Returns (tzinfo, warning_message). warning_message is None when the name resolved cleanly.
    """
    clean = str(timezone_name or "").strip()
    if not clean:
        return (ZoneInfo(DEFAULT_TIMEZONE), f"Timezone missing; using {DEFAULT_TIMEZONE}.")
    try:
        return (ZoneInfo(clean), None)
    except (ZoneInfoNotFoundError, ValueError):
        return (ZoneInfo(DEFAULT_TIMEZONE), f"Unknown timezone {clean!r}; using {DEFAULT_TIMEZONE}.")


class ZonedClock:
    """Single source of "now" for the reminder engine, always in the configured zone."""

    def __init__(self, tz: ZoneInfo) -> None:
        self.tz = tz

    @property
    def timezone_name(self) -> str:
        return str(self.tz.key)

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.tz)

    def localize(self, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    def __call__(self) -> datetime:
        return self.now()
