from __future__ import annotations

from dataclasses import dataclass

import discord


class DeliveryError(Exception):
    """A single send could not be delivered (transport fault, unknown target, DMs closed)."""


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    target: str
    ok: bool
    error: str | None = None


class DiscordDispatcher:
    def __init__(self, bot) -> None:
        self.bot = bot

    async def _get_channel(self, channel_id: int):
        if int(channel_id or 0) <= 0:
            return None
        ch = self.bot.get_channel(int(channel_id))
        if ch is not None:
            return ch
        try:
            return await self.bot.fetch_channel(int(channel_id))
        except discord.DiscordException:
            return None

    async def _get_user(self, user_id: int):
        user = self.bot.get_user(int(user_id))
        if user is not None:
            return user
        try:
            return await self.bot.fetch_user(int(user_id))
        except discord.DiscordException:
            return None

    async def post_channel_message(self, channel_id: int, content: str, *, embed: discord.Embed | None = None):
        channel = await self._get_channel(channel_id)
        if channel is None:
            raise DeliveryError(f"channel not found: {channel_id}")
        try:
            if embed is not None:
                return await channel.send(content=content, embed=embed)
            return await channel.send(content=content)
        except discord.HTTPException as e:
            raise DeliveryError(f"channel send failed: {e}") from e

    async def send_direct_message(self, user_id: int, content: str):
        user = await self._get_user(user_id)
        if user is None:
            raise DeliveryError(f"user not found: {user_id}")
        try:
            return await user.send(content)
        except discord.Forbidden as e:
            raise DeliveryError(f"DMs closed for user {user_id}") from e
        except discord.HTTPException as e:
            raise DeliveryError(f"DM send failed for user {user_id}: {e}") from e
