from __future__ import annotations

from datetime import datetime, tzinfo

import discord

from config.defaults import BRAND_NAME
from config.defaults import UPCOMING_EVENTS_PIN_MARKER
from reminders.catalog import Event
from reminders.catalog import parse_event_start
from reminders.catalog import upcoming_events
from reminders.thresholds import ReminderThreshold


DEFAULT_EVENT_TITLE = f"{BRAND_NAME} Event"
DEFAULT_EVENT_DESCRIPTION = "House music family 🖤"
DEFAULT_PIN_HEADLINE = f"{BRAND_NAME} Presents: In The Clouds"
LOCATION_TBA = "TBA"
PIN_TEXT_LIMIT = 2000


def _clock_time(dt: datetime) -> str:
    # 2:00 PM, no zero padding on the hour
    return f"{int(dt.strftime('%I'))}:{dt.strftime('%M %p')}"


def format_when_long(dt: datetime) -> str:
    # Saturday, February 7 • 2:00 PM EST
    return f"{dt.strftime('%A, %B')} {dt.day} • {_clock_time(dt)} {dt.strftime('%Z')}".rstrip()


def format_when_short(dt: datetime) -> str:
    # Saturday, Feb 7 • 2:00 PM
    return f"{dt.strftime('%A, %b')} {dt.day} • {_clock_time(dt)}"


def format_discord_timestamp(dt: datetime, style: str = "R") -> str:
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("dt must be timezone-aware")
    return f"<t:{int(dt.timestamp())}:{style}>"


def build_event_embed(event: Event, tz: tzinfo) -> discord.Embed:
    embed = discord.Embed(
        title=event.title or DEFAULT_EVENT_TITLE,
        description=event.description or DEFAULT_EVENT_DESCRIPTION,
    )
    start = parse_event_start(event, tz)
    if start is not None:
        embed.add_field(
            name="When",
            value=f"{format_when_long(start)} ({format_discord_timestamp(start)})",
            inline=False,
        )
        embed.timestamp = start
    embed.add_field(name="Where", value=event.location or LOCATION_TBA, inline=False)
    if event.link:
        embed.add_field(name="Ticket Link", value=event.link, inline=False)
    if event.image_ref:
        embed.set_image(url=event.image_ref)
    embed.set_footer(text=BRAND_NAME)
    return embed


def build_reminder_dm(event: Event, start: datetime, threshold: ReminderThreshold) -> str:
    lines = [
        threshold.announcement(),
        "",
        f"**{event.title or DEFAULT_EVENT_TITLE}**",
        format_when_short(start),
        event.location or LOCATION_TBA,
    ]
    if event.link:
        lines.append(event.link)
    return "\n".join(lines)


def build_upcoming_events_pin_text(
    events: list[Event],
    now: datetime,
    tz: tzinfo,
    *,
    reminder_labels: list[str] | None = None,
    limit: int = PIN_TEXT_LIMIT,
) -> str:
    """Pin body for the events channel. Later events are dropped from the end to stay under `limit`."""
    upcoming = upcoming_events(events, now, tz)

    headline = DEFAULT_PIN_HEADLINE
    when_line = ""
    ticket_line = ""
    if upcoming:
        nxt, start = upcoming[0]
        headline = nxt.title or headline
        # Sat 7 Feb from 2:00 PM
        when_line = f"{start.strftime('%a')} {start.day} {start.strftime('%b')} from {_clock_time(start)}"
        if nxt.link:
            ticket_line = f"Ticket Link • {nxt.link}"

    labels = [label for label in (reminder_labels or []) if label] or ["24h"]
    reminder_when = " / ".join(f"**{label}**" for label in labels)

    head = [
        f"**{BRAND_NAME} • Upcoming Events**",
        "",
        f"**{headline}**",
    ]
    if when_line:
        head.append(when_line)
    if ticket_line:
        head.append(ticket_line)
    head.append("")
    tail = [
        "—",
        "**How to use this channel**",
        "• Use **/nextevent** to see the next upcoming event (private, just for you)",
        "• Use **/remindme** to get a DM reminder before events",
        f"• Reminders post here {reminder_when} before showtime",
        "",
        "No spam. No noise. Just what’s next.",
        "See you in the clouds 🖤",
        "",
        UPCOMING_EVENTS_PIN_MARKER,
    ]

    later = upcoming[1:]
    shown = len(later)
    while True:
        middle: list[str] = []
        for event, start in later[:shown]:
            middle.append(f"{start.strftime('%A, %B')} {start.day}")
            middle.append(event.title or DEFAULT_EVENT_TITLE)
            middle.append("")
        if shown < len(later):
            middle.append(f"…and {len(later) - shown} more")
            middle.append("")
        text = "\n".join(head + middle + tail)
        if len(text) <= limit or shown == 0:
            return text
        shown -= 1
