from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RuntimeDeps:
    # guild / channels
    guild_id: int
    welcome_channel_id: int
    event_channel_id: int
    announcements_channel_id: int

    # reminders
    reminder_service: Any


@dataclass(frozen=True)
class RuntimeBootDeps:
    commands_registered: bool
    reminders_enabled: bool
    reminder_loop_func: Callable
