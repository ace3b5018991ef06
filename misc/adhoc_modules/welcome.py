from __future__ import annotations

from datetime import datetime, timezone

import discord

from misc.adhoc_modules.community_copy import NEW_ACCOUNT_LINE
from misc.adhoc_modules.community_copy import PUBLIC_WELCOME_TEXT
from misc.adhoc_modules.community_copy import VETERAN_ACCOUNT_LINE
from misc.adhoc_modules.community_copy import WELCOME_EMBED_FOOTER
from misc.adhoc_modules.community_copy import WELCOME_EMBED_TITLE


NEW_ACCOUNT_DAYS = 30
VETERAN_ACCOUNT_DAYS = 365


def account_age_days(created_at: datetime, now: datetime | None = None) -> float:
    now_utc = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (now_utc - created_at).total_seconds() / 86400.0


def build_personal_welcome_dm(display_name: str, created_at: datetime, now: datetime | None = None) -> str:
    age = account_age_days(created_at, now)
    extra = ""
    if age < NEW_ACCOUNT_DAYS:
        extra = f"\n\n{NEW_ACCOUNT_LINE}"
    elif age > VETERAN_ACCOUNT_DAYS:
        extra = f"\n\n{VETERAN_ACCOUNT_LINE}"
    return f"Welcome **{display_name}** 🖤\n\n{PUBLIC_WELCOME_TEXT}{extra}"


def build_welcome_embed(member: discord.Member) -> discord.Embed:
    embed = discord.Embed(
        title=WELCOME_EMBED_TITLE,
        description=PUBLIC_WELCOME_TEXT,
        timestamp=datetime.now(timezone.utc),
    )
    avatar = getattr(member, "display_avatar", None)
    if avatar is not None:
        embed.set_thumbnail(url=avatar.with_size(256).url)
    embed.set_footer(text=WELCOME_EMBED_FOOTER)
    return embed


async def post_public_welcome(bot, member: discord.Member, *, welcome_channel_id: int) -> bool:
    if welcome_channel_id <= 0:
        return False
    channel = bot.get_channel(int(welcome_channel_id))
    if channel is None:
        try:
            channel = await bot.fetch_channel(int(welcome_channel_id))
        except discord.DiscordException as e:
            print(f"[Welcome] could not fetch welcome channel {welcome_channel_id}: {e}")
            return False
    try:
        await channel.send(content=f"Welcome {member.mention} 🖤", embed=build_welcome_embed(member))
    except discord.HTTPException as e:
        print(f"[Welcome] public welcome failed for member={member.id}: {e}")
        return False
    return True


async def send_personal_welcome(member: discord.Member) -> bool:
    display_name = getattr(member, "display_name", None) or member.name
    text = build_personal_welcome_dm(display_name, member.created_at)
    try:
        await member.send(text)
    except discord.HTTPException:
        # DMs closed
        return False
    return True
