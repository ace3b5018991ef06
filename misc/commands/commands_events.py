from __future__ import annotations

import asyncio

import discord
from discord import app_commands
from discord.ext import commands
from misc.adhoc_modules.community_copy import NO_UPCOMING_EVENTS_TEXT
from misc.adhoc_modules.community_copy import OPTED_IN_TEXT
from misc.adhoc_modules.community_copy import OPTED_OUT_TEXT
from misc.adhoc_modules.community_copy import OPTIN_FAILED_TEXT
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from reminders.formatting import build_event_embed


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> bool:
    if deps.guild_id <= 0:
        print("[Commands] CABANA_GUILD_ID not set; skipping slash command registration.")
        return False

    guild = discord.Object(id=int(deps.guild_id))
    service = deps.reminder_service
    registry = deps.optin_registry
    store_lock = deps.store_lock or asyncio.Lock()

    @bot.tree.command(name="nextevent", description="Show the next Clique Cabana event", guild=guild)
    async def nextevent(interaction: discord.Interaction):
        upcoming = await service.next_event()
        if upcoming is None:
            await interaction.response.send_message(NO_UPCOMING_EVENTS_TEXT, ephemeral=True)
            return
        event, _start = upcoming
        await interaction.response.send_message(embed=build_event_embed(event, service.tz), ephemeral=True)

    @bot.tree.command(name="remindme", description="Opt in to DM reminders for events", guild=guild)
    async def remindme(interaction: discord.Interaction):
        try:
            async with store_lock:
                await asyncio.to_thread(registry.opt_in, int(interaction.user.id))
        except OSError as e:
            print(f"[OptIns] opt-in write failed user={interaction.user.id}: {e}")
            await interaction.response.send_message(OPTIN_FAILED_TEXT, ephemeral=True)
            return
        await interaction.response.send_message(OPTED_IN_TEXT, ephemeral=True)

    @bot.tree.command(name="remindoff", description="Opt out of DM reminders for events", guild=guild)
    async def remindoff(interaction: discord.Interaction):
        try:
            async with store_lock:
                await asyncio.to_thread(registry.opt_out, int(interaction.user.id))
        except OSError as e:
            print(f"[OptIns] opt-out write failed user={interaction.user.id}: {e}")
            await interaction.response.send_message(OPTIN_FAILED_TEXT, ephemeral=True)
            return
        await interaction.response.send_message(OPTED_OUT_TEXT, ephemeral=True)

    return True
