from __future__ import annotations

import asyncio

from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from reminders.service import summarize_report


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    service = deps.reminder_service

    async def require_owner(ctx: commands.Context) -> bool:
        if gates.user_is_owner(ctx.author):
            return True
        await ctx.send("This command is owner-only.")
        return False

    @bot.command(name="reminders.status")
    async def cmd_reminders_status(ctx: commands.Context):
        if not await require_owner(ctx):
            return
        upcoming = await service.next_event()
        lines = [service.status_text()]
        if upcoming is None:
            lines.append("- next_event: (none)")
        else:
            event, start = upcoming
            lines.append(f"- next_event: {event.event_id} at {start.isoformat()}")
        async with deps.store_lock:
            opted_in = await asyncio.to_thread(deps.optin_registry.list_opted_in)
        lines.append(f"- opted_in_users: {len(opted_in)}")
        await deps.send_chunked(ctx.channel, "```\n" + "\n".join(lines) + "\n```")

    @bot.command(name="reminders.check")
    async def cmd_reminders_check(ctx: commands.Context):
        if not await require_owner(ctx):
            return
        report = await service.run_tick()
        summary = summarize_report(report)
        fired = ", ".join(summary["fired"]) or "none"
        await ctx.send(
            f"Reminder check ran: event={summary['event_id'] or '(none)'} "
            f"minutes_until={summary['minutes_until']} fired={fired} "
            f"delivered={summary['delivered']} failed={summary['failed']}"
        )
