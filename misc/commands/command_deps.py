from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable


def _default_false(*args, **kwargs) -> bool:
    return False


@dataclass(frozen=True)
class CommandDeps:
    # Core/shared
    send_chunked: Callable | None = None
    guild_id: int = 0

    # Reminder engine
    reminder_service: Any = None
    optin_registry: Any = None
    store_lock: Any = None


@dataclass(frozen=True)
class CommandGates:
    owner_user_ids: set[int] = field(default_factory=set)
    user_is_owner: Callable[[Any], bool] = _default_false
