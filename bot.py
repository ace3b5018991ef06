import os
import asyncio
from functools import partial
import discord
from discord.ext import commands
from dotenv import load_dotenv
from config.defaults import DEFAULT_ANNOUNCEMENTS_CHANNEL_ID
from config.defaults import DEFAULT_EVENT_CHANNEL_ID
from config.defaults import DEFAULT_EVENTS_FILENAME
from config.defaults import DEFAULT_GUILD_ID
from config.defaults import DEFAULT_OPTINS_FILENAME
from config.defaults import DEFAULT_REMINDER_THRESHOLDS_FILENAME
from config.defaults import DEFAULT_REMINDER_TICK_SECONDS
from config.defaults import DEFAULT_TIMEZONE
from config.defaults import DEFAULT_WELCOME_CHANNEL_ID
from config.env import env_flag
from config.env import env_int
from config.env import is_production
from config.env import parse_id_set
from config.env import resolve_path
from jobs.reminders import reminder_loop as reminder_loop_service
from misc.runtime_wiring import wire_bot_runtime
from reminders.catalog import load_events
from reminders.clock import ZonedClock
from reminders.clock import resolve_timezone
from reminders.dispatch import DiscordDispatcher
from reminders.optin_store import OptInRegistry
from reminders.service import ReminderService
from reminders.state import ReminderStateTracker
from reminders.thresholds import load_reminder_config

# Railway provides env vars directly; .env is for local runs only.
if not is_production():
    load_dotenv()

REPO_ROOT = os.path.dirname(os.path.abspath(__file__))

# =========================
# ENV
# =========================
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN") or os.getenv("BOT_TOKEN")

if not DISCORD_TOKEN:
    raise RuntimeError("Missing DISCORD_TOKEN env var")

GUILD_ID = env_int("CABANA_GUILD_ID", DEFAULT_GUILD_ID)
EVENT_CHANNEL_ID = env_int("CABANA_EVENT_CHANNEL_ID", DEFAULT_EVENT_CHANNEL_ID)
WELCOME_CHANNEL_ID = env_int("CABANA_WELCOME_CHANNEL_ID", DEFAULT_WELCOME_CHANNEL_ID)
ANNOUNCEMENTS_CHANNEL_ID = env_int("CABANA_ANNOUNCEMENTS_CHANNEL_ID", DEFAULT_ANNOUNCEMENTS_CHANNEL_ID)
OWNER_USER_IDS = parse_id_set(os.getenv("CABANA_OWNER_USER_IDS"))

# =========================
# REMINDER ENGINE
# =========================
REMINDERS_ENABLED = env_flag("CABANA_REMINDERS_ENABLED", True)
REMINDER_TICK_SECONDS = env_int("CABANA_REMINDER_TICK_SECONDS", DEFAULT_REMINDER_TICK_SECONDS)
EVENTS_PATH = resolve_path(os.getenv("CABANA_EVENTS_PATH", DEFAULT_EVENTS_FILENAME), REPO_ROOT)
OPTINS_PATH = resolve_path(os.getenv("CABANA_OPTINS_PATH", DEFAULT_OPTINS_FILENAME), REPO_ROOT)
REMINDER_THRESHOLDS_PATH = resolve_path(
    os.getenv("CABANA_REMINDER_THRESHOLDS_PATH", DEFAULT_REMINDER_THRESHOLDS_FILENAME),
    REPO_ROOT,
)

TZ, TZ_WARNING = resolve_timezone(os.getenv("CABANA_TIMEZONE", os.getenv("TIMEZONE", DEFAULT_TIMEZONE)))
if TZ_WARNING:
    print(f"[CFG] {TZ_WARNING}")

REMINDER_CONFIG, REMINDER_CONFIG_WARNING = load_reminder_config(
    REMINDER_THRESHOLDS_PATH,
    env_thresholds=os.getenv("CABANA_REMINDER_THRESHOLDS"),
    env_tolerance=os.getenv("CABANA_REMINDER_TOLERANCE_MINUTES"),
)
if REMINDER_CONFIG_WARNING:
    print(f"[CFG] {REMINDER_CONFIG_WARNING}")

print(
    f"[CFG] reminders_enabled={REMINDERS_ENABLED} tz={TZ.key} tick_s={REMINDER_TICK_SECONDS} "
    f"tolerance_m={REMINDER_CONFIG.tolerance_minutes} "
    f"thresholds={','.join(t.label for t in REMINDER_CONFIG.thresholds)} "
    f"event_channel={EVENT_CHANNEL_ID or '(unset)'} welcome_channel={WELCOME_CHANNEL_ID or '(unset)'} "
    f"announcements_channel={ANNOUNCEMENTS_CHANNEL_ID or '(unset)'} guild={GUILD_ID or '(unset)'} "
    f"owner_ids={len(OWNER_USER_IDS)}"
)
print(f"[CFG] events_path={EVENTS_PATH} optins_path={OPTINS_PATH}")

DISCORD_MAX_MESSAGE_LEN = 1900  # keep under 2000 hard limit

def chunk_text(text: str, limit: int = DISCORD_MAX_MESSAGE_LEN) -> list[str]:
    text = text or ""
    if len(text) <= limit:
        return [text]

    chunks = []
    remaining = text

    while len(remaining) > limit:
        # Prefer splitting on paragraph, then newline, then space
        split_at = remaining.rfind("\n\n", 0, limit)
        if split_at == -1:
            split_at = remaining.rfind("\n", 0, limit)
        if split_at == -1:
            split_at = remaining.rfind(" ", 0, limit)
        if split_at == -1:
            split_at = limit

        chunk = remaining[:split_at].strip()
        if chunk:
            chunks.append(chunk)

        remaining = remaining[split_at:].strip()

    if remaining:
        chunks.append(remaining)

    return chunks


async def send_chunked(channel: discord.abc.Messageable, text: str) -> None:
    for part in chunk_text(text, DISCORD_MAX_MESSAGE_LEN):
        await channel.send(part)

# =========================
# DISCORD BOT
# =========================
intents = discord.Intents.default()
intents.members = True  # guild join events
intents.message_content = True  # owner prefix commands

bot = commands.Bot(command_prefix="!", intents=intents)

store_lock = asyncio.Lock()
optin_registry = OptInRegistry(OPTINS_PATH)

reminder_service = ReminderService(
    catalog_loader=partial(load_events, EVENTS_PATH),
    registry=optin_registry,
    state=ReminderStateTracker(),
    dispatcher=DiscordDispatcher(bot),
    clock=ZonedClock(TZ),
    config=REMINDER_CONFIG,
    channel_id=EVENT_CHANNEL_ID,
    store_lock=store_lock,
    enabled=REMINDERS_ENABLED,
)

async def reminder_loop() -> None:
    return await reminder_loop_service(
        reminder_service=reminder_service,
        interval_seconds=REMINDER_TICK_SECONDS,
    )

wire_bot_runtime(
    bot,
    guild_id=GUILD_ID,
    welcome_channel_id=WELCOME_CHANNEL_ID,
    event_channel_id=EVENT_CHANNEL_ID,
    announcements_channel_id=ANNOUNCEMENTS_CHANNEL_ID,
    owner_user_ids=OWNER_USER_IDS,
    send_chunked=send_chunked,
    reminder_service=reminder_service,
    optin_registry=optin_registry,
    store_lock=store_lock,
    reminders_enabled=REMINDERS_ENABLED,
    reminder_loop_func=reminder_loop,
)


bot.run(DISCORD_TOKEN)
