from __future__ import annotations

from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_events import register as register_events
from misc.commands.commands_owner import register as register_owner
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps
from misc.events_runtime import register_runtime_events


def wire_bot_runtime(
    bot,
    *,
    guild_id: int,
    welcome_channel_id: int,
    event_channel_id: int,
    announcements_channel_id: int,
    owner_user_ids: set[int],
    send_chunked,
    reminder_service,
    optin_registry,
    store_lock,
    reminders_enabled: bool,
    reminder_loop_func,
) -> None:
    def user_is_owner(user) -> bool:
        try:
            return int(user.id) in owner_user_ids
        except (AttributeError, TypeError, ValueError):
            return False

    command_deps = CommandDeps(
        send_chunked=send_chunked,
        guild_id=guild_id,
        reminder_service=reminder_service,
        optin_registry=optin_registry,
        store_lock=store_lock,
    )
    command_gates = CommandGates(
        owner_user_ids=set(owner_user_ids),
        user_is_owner=user_is_owner,
    )

    commands_registered = register_events(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_owner(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            guild_id=guild_id,
            welcome_channel_id=welcome_channel_id,
            event_channel_id=event_channel_id,
            announcements_channel_id=announcements_channel_id,
            reminder_service=reminder_service,
        ),
        boot=RuntimeBootDeps(
            commands_registered=commands_registered,
            reminders_enabled=reminders_enabled,
            reminder_loop_func=reminder_loop_func,
        ),
    )
