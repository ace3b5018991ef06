from __future__ import annotations

import asyncio

import discord
from config.defaults import ANNOUNCEMENT_PIN_MARKER
from config.defaults import UPCOMING_EVENTS_PIN_MARKER
from discord.ext import commands
from misc.adhoc_modules.community_copy import FESTIVAL_ANNOUNCEMENT_TEXT
from misc.adhoc_modules.pins import ensure_pinned_message
from misc.adhoc_modules.welcome import post_public_welcome
from misc.adhoc_modules.welcome import send_personal_welcome
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps
from reminders.formatting import build_upcoming_events_pin_text


async def sync_guild_commands(bot: commands.Bot, guild_id: int) -> int:
    synced = await bot.tree.sync(guild=discord.Object(id=int(guild_id)))
    return len(synced)


async def ensure_upcoming_events_pin(bot: commands.Bot, deps: RuntimeDeps) -> bool:
    service = deps.reminder_service
    events = await service.load_events()
    text = build_upcoming_events_pin_text(
        events,
        service.clock.now(),
        service.tz,
        reminder_labels=[t.label for t in service.config.thresholds],
    )
    return await ensure_pinned_message(
        bot,
        channel_id=deps.event_channel_id,
        text=text,
        marker=UPCOMING_EVENTS_PIN_MARKER,
        label="upcoming-events",
    )


async def ensure_announcement_pin(bot: commands.Bot, deps: RuntimeDeps) -> bool:
    return await ensure_pinned_message(
        bot,
        channel_id=deps.announcements_channel_id,
        text=FESTIVAL_ANNOUNCEMENT_TEXT,
        marker=ANNOUNCEMENT_PIN_MARKER,
        label="announcement",
    )


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    @bot.event
    async def on_ready():
        print(f"Cabana is online as {bot.user}")

        if boot.commands_registered and not getattr(bot, "_commands_synced", False):
            try:
                n = await sync_guild_commands(bot, deps.guild_id)
                bot._commands_synced = True
                print(f"[Commands] synced {n} slash commands for guild={deps.guild_id}")
            except discord.HTTPException as e:
                print(f"[Commands] slash command sync failed: {e}")

        if not getattr(bot, "_pins_ensured", False):
            bot._pins_ensured = True
            if await ensure_upcoming_events_pin(bot, deps):
                print("[Pins] upcoming-events message posted")
            if await ensure_announcement_pin(bot, deps):
                print("[Pins] announcement posted")

        if boot.reminders_enabled and not getattr(bot, "_reminder_task", None):
            bot._reminder_task = asyncio.create_task(boot.reminder_loop_func())
            print("[Reminders] reminder loop started (every minute)")

    @bot.event
    async def on_member_join(member: discord.Member):
        await post_public_welcome(bot, member, welcome_channel_id=deps.welcome_channel_id)
        await send_personal_welcome(member)
