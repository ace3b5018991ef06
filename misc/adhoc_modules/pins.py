from __future__ import annotations

import discord


DISCORD_MESSAGE_LIMIT = 2000


def fit_with_marker(text: str, marker: str, limit: int = DISCORD_MESSAGE_LIMIT) -> str:
    if len(text) <= limit:
        return text
    # find_marked_pin matches on the marker
    keep = max(0, limit - len(marker) - 1)
    return text[:keep].rstrip() + "\n" + marker


async def _resolve_text_channel(bot, channel_id: int):
    if channel_id <= 0:
        return None
    ch = bot.get_channel(int(channel_id))
    if ch is None:
        try:
            ch = await bot.fetch_channel(int(channel_id))
        except discord.DiscordException:
            return None
    if not hasattr(ch, "pins") or not hasattr(ch, "send"):
        return None
    return ch


async def find_marked_pin(channel, *, marker: str, author_id: int):
    try:
        async for msg in channel.pins():
            author = getattr(msg, "author", None)
            if int(getattr(author, "id", 0) or 0) != int(author_id):
                continue
            if marker in (getattr(msg, "content", "") or ""):
                return msg
    except discord.HTTPException as e:
        print(f"[Pins] could not list pins in channel={getattr(channel, 'id', '?')}: {e}")
    return None


async def ensure_pinned_message(bot, *, channel_id: int, text: str, marker: str, label: str) -> bool:
    """Post `text` and pin it unless a bot-authored pin containing `marker` already exists."""
    if channel_id <= 0:
        print(f"[Pins] {label}: channel id not set; skipping.")
        return False
    channel = await _resolve_text_channel(bot, channel_id)
    if channel is None:
        print(f"[Pins] {label}: channel {channel_id} not found or not text-based.")
        return False

    existing = await find_marked_pin(channel, marker=marker, author_id=int(bot.user.id))
    if existing is not None:
        return False

    try:
        msg = await channel.send(fit_with_marker(text, marker))
    except discord.HTTPException as e:
        print(f"[Pins] {label}: send failed: {e}")
        return False
    try:
        await msg.pin()
    except discord.Forbidden:
        print(f"[Pins] {label}: could not pin (missing Manage Messages permission).")
    except discord.HTTPException as e:
        print(f"[Pins] {label}: pin failed: {e}")
    return True
