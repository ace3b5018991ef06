from __future__ import annotations

# Guild / channels (override via CABANA_* env vars)
DEFAULT_GUILD_ID = 0
DEFAULT_EVENT_CHANNEL_ID = 0  # #upcoming-events
DEFAULT_WELCOME_CHANNEL_ID = 0  # #welcome
DEFAULT_ANNOUNCEMENTS_CHANNEL_ID = 1458512486125797592  # #announcements

DEFAULT_TIMEZONE = "America/New_York"

DEFAULT_EVENTS_FILENAME = "events.json"
DEFAULT_OPTINS_FILENAME = "data/optins.json"
DEFAULT_REMINDER_THRESHOLDS_FILENAME = "config/reminder_thresholds.yml"

DEFAULT_REMINDER_TICK_SECONDS = 60
DEFAULT_REMINDER_TOLERANCE_MINUTES = 1

UPCOMING_EVENTS_PIN_MARKER = "CC_UPCOMING_EVENTS_PIN_V2"
ANNOUNCEMENT_PIN_MARKER = "CC_FESTIVAL_SERIES_ANNOUNCEMENT_V1"

BRAND_NAME = "Clique Cabana"
