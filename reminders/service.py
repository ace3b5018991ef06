from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from reminders.catalog import Event
from reminders.catalog import upcoming_events
from reminders.dispatch import DeliveryError
from reminders.dispatch import DeliveryResult
from reminders.formatting import build_event_embed
from reminders.formatting import build_reminder_dm
from reminders.optin_store import OptInRegistry
from reminders.state import ReminderStateTracker
from reminders.thresholds import ReminderConfig
from reminders.thresholds import ReminderThreshold


@dataclass(frozen=True, slots=True)
class ReminderDecision:
    event: Event
    start: datetime
    threshold: ReminderThreshold
    minutes_until: int


@dataclass(slots=True)
class ReminderTickReport:
    now: datetime
    event_id: str | None = None
    minutes_until: int | None = None
    fired: list[str] = field(default_factory=list)
    results: list[DeliveryResult] = field(default_factory=list)

    @property
    def failures(self) -> list[DeliveryResult]:
        return [r for r in self.results if not r.ok]


def minutes_until(start: datetime, now: datetime) -> int:
    # half-up, not banker's rounding; UTC so a DST change in between counts
    delta_minutes = (start.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds() / 60.0
    return int(math.floor(delta_minutes + 0.5))


def should_trigger(minutes_left: int, minutes_before: int, tolerance_minutes: int) -> bool:
    return abs(int(minutes_left) - int(minutes_before)) <= int(tolerance_minutes)


class ReminderService:
    """Decides once per tick whether a threshold of the next event was crossed, and dispatches it once.

    A threshold whose tolerance window passes without a tick is skipped for good; it never fires late.
    """

    def __init__(
        self,
        *,
        catalog_loader: Callable[[], list[Event]],
        registry: OptInRegistry,
        state: ReminderStateTracker,
        dispatcher,
        clock,
        config: ReminderConfig,
        channel_id: int,
        store_lock: asyncio.Lock | None = None,
        enabled: bool = True,
    ) -> None:
        self.catalog_loader = catalog_loader
        self.registry = registry
        self.state = state
        self.dispatcher = dispatcher
        self.clock = clock
        self.config = config
        self.channel_id = int(channel_id or 0)
        self.store_lock = store_lock or asyncio.Lock()
        self.enabled = bool(enabled)

        self._warned_missing_channel = False

    @property
    def tz(self):
        return self.clock.tz

    async def load_events(self) -> list[Event]:
        return await asyncio.to_thread(self.catalog_loader)

    async def next_event(self) -> tuple[Event, datetime] | None:
        events = await self.load_events()
        upcoming = upcoming_events(events, self.clock.now(), self.tz)
        return upcoming[0] if upcoming else None

    def _select(self, events: list[Event], now: datetime) -> tuple[Event, datetime, int] | None:
        upcoming = upcoming_events(events, now, self.tz)
        if not upcoming:
            return None
        event, start = upcoming[0]
        return (event, start, minutes_until(start, now))

    def evaluate(self, events: list[Event], now: datetime) -> list[ReminderDecision]:
        return self._decide(self._select(events, now))

    def _decide(self, selected: tuple[Event, datetime, int] | None) -> list[ReminderDecision]:
        if selected is None:
            return []
        event, start, left = selected
        decisions: list[ReminderDecision] = []
        for threshold in self.config.thresholds:
            if not should_trigger(left, threshold.minutes_before, self.config.tolerance_minutes):
                continue
            if self.state.has_fired(event.event_id, threshold.label):
                continue
            decisions.append(ReminderDecision(event=event, start=start, threshold=threshold, minutes_until=left))
        return decisions

    async def run_tick(self) -> ReminderTickReport:
        now = self.clock.now()
        report = ReminderTickReport(now=now)
        if not self.enabled:
            return report

        selected = self._select(await self.load_events(), now)
        if selected is not None:
            event, _start, left = selected
            report.event_id = event.event_id
            report.minutes_until = left

        for decision in self._decide(selected):
            self.state.mark_fired(decision.event.event_id, decision.threshold.label)
            report.fired.append(decision.threshold.label)
            results = await self._dispatch(decision)
            report.results.extend(results)

            dm_results = [r for r in results if r.target.startswith("user:")]
            dm_ok = sum(1 for r in dm_results if r.ok)
            print(
                f"[Reminders] fired event={decision.event.event_id} threshold={decision.threshold.label} "
                f"minutes_until={decision.minutes_until} dms={dm_ok}/{len(dm_results)}"
            )
            for failed in (r for r in results if not r.ok):
                print(f"[Reminders] delivery failed target={failed.target}: {failed.error}")
        return report

    async def _recipients(self) -> list[int]:
        async with self.store_lock:
            ids = await asyncio.to_thread(self.registry.list_opted_in)
        return sorted(ids)

    async def _dispatch(self, decision: ReminderDecision) -> list[DeliveryResult]:
        results: list[DeliveryResult] = []
        announcement = decision.threshold.announcement()

        if self.channel_id > 0:
            target = f"channel:{self.channel_id}"
            try:
                await self.dispatcher.post_channel_message(
                    self.channel_id,
                    announcement,
                    embed=build_event_embed(decision.event, self.tz),
                )
                results.append(DeliveryResult(target=target, ok=True))
            except DeliveryError as e:
                results.append(DeliveryResult(target=target, ok=False, error=str(e)))
            except Exception as e:
                results.append(DeliveryResult(target=target, ok=False, error=f"unexpected: {e}"))
        elif not self._warned_missing_channel:
            print("[Reminders] CABANA_EVENT_CHANNEL_ID not set; skipping channel reminder posts.")
            self._warned_missing_channel = True

        dm_text = build_reminder_dm(decision.event, decision.start, decision.threshold)
        for user_id in await self._recipients():
            target = f"user:{user_id}"
            try:
                await self.dispatcher.send_direct_message(user_id, dm_text)
                results.append(DeliveryResult(target=target, ok=True))
            except DeliveryError as e:
                results.append(DeliveryResult(target=target, ok=False, error=str(e)))
            except Exception as e:
                results.append(DeliveryResult(target=target, ok=False, error=f"unexpected: {e}"))
        return results

    def status_text(self) -> str:
        lines = [
            "Reminder engine status:",
            f"- enabled: {self.enabled}",
            f"- timezone: {getattr(self.tz, 'key', self.tz)}",
            f"- channel_id: {self.channel_id or '(not set)'}",
            f"- tolerance_minutes: {self.config.tolerance_minutes}",
            "- thresholds: "
            + ", ".join(f"{t.label}={t.minutes_before}m" for t in self.config.thresholds),
        ]
        markers = self.state.fired_markers()
        lines.append(f"- fired_markers: {len(markers)}")
        for event_id, label in markers[-10:]:
            lines.append(f"  - {event_id} @ {label}")
        return "\n".join(lines)


def summarize_report(report: ReminderTickReport) -> dict[str, Any]:
    return {
        "event_id": report.event_id,
        "minutes_until": report.minutes_until,
        "fired": list(report.fired),
        "delivered": sum(1 for r in report.results if r.ok),
        "failed": len(report.failures),
    }
