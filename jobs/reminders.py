from __future__ import annotations

import asyncio


async def reminder_loop(
    *,
    reminder_service,
    interval_seconds: int = 60,
    max_ticks: int | None = None,
) -> None:
    ticks = 0
    while True:
        try:
            await reminder_service.run_tick()
        except Exception as e:
            print(f"[Reminders] loop error: {e}")
        ticks += 1
        if max_ticks is not None and ticks >= max_ticks:
            return
        await asyncio.sleep(max(1, int(interval_seconds)))
