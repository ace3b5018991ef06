from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Any


START_KEYS = ("startInstant", "startISO", "start")
IMAGE_KEYS = ("imageRef", "imageUrl")


@dataclass(frozen=True, slots=True)
class Event:
    event_id: str
    title: str
    start_text: str
    location: str | None = None
    link: str | None = None
    description: str | None = None
    image_ref: str | None = None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_text(record: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        text = _optional_text(record.get(key))
        if text:
            return text
    return None


def event_from_record(record: Any) -> Event | None:
    if not isinstance(record, dict):
        return None
    title = _optional_text(record.get("title")) or ""
    start_text = _first_text(record, START_KEYS) or ""
    event_id = _optional_text(record.get("id"))
    if event_id is None:
        # fallback id for records without one
        event_id = f"{title}@{start_text}"
    return Event(
        event_id=event_id,
        title=title,
        start_text=start_text,
        location=_optional_text(record.get("location")),
        link=_optional_text(record.get("link")),
        description=_optional_text(record.get("description")),
        image_ref=_first_text(record, IMAGE_KEYS),
    )


def load_events(path: str | Path) -> list[Event]:
    p = Path(path)
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"[Events] catalog not found at {p}; treating as empty")
        return []
    except Exception as e:
        print(f"[Events] failed to read catalog {p}: {e}")
        return []

    records = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(records, list):
        print(f"[Events] catalog {p} has no 'events' list; treating as empty")
        return []

    out: list[Event] = []
    for record in records:
        event = event_from_record(record)
        if event is not None:
            out.append(event)
    return out


def parse_event_start(event: Event, tz: tzinfo) -> datetime | None:
    """Start instant in `tz`. Naive values are read as wall time in `tz`; None if unparseable."""
    raw = (event.start_text or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def upcoming_events(events: list[Event], now: datetime, tz: tzinfo) -> list[tuple[Event, datetime]]:
    # same-zone aware datetimes compare as wall time, so go through UTC
    now_utc = now.astimezone(timezone.utc)
    pairs: list[tuple[Event, datetime]] = []
    for event in events:
        start = parse_event_start(event, tz)
        if start is None or start.astimezone(timezone.utc) <= now_utc:
            continue
        pairs.append((event, start))
    pairs.sort(key=lambda pair: pair[1].astimezone(timezone.utc))
    return pairs


def select_next_event(events: list[Event], now: datetime, tz: tzinfo) -> Event | None:
    upcoming = upcoming_events(events, now, tz)
    if not upcoming:
        return None
    return upcoming[0][0]
