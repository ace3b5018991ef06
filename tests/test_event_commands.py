from __future__ import annotations

import asyncio
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest import mock
from zoneinfo import ZoneInfo

try:
    import discord
    from discord.ext import commands
except ModuleNotFoundError:
    discord = None
    commands = None

if commands is not None:
    from misc.adhoc_modules.community_copy import NO_UPCOMING_EVENTS_TEXT
    from misc.adhoc_modules.community_copy import OPTED_IN_TEXT
    from misc.adhoc_modules.community_copy import OPTED_OUT_TEXT
    from misc.adhoc_modules.community_copy import OPTIN_FAILED_TEXT
    from misc.commands.command_deps import CommandDeps
    from misc.commands.command_deps import CommandGates
    from misc.commands.commands_events import register as register_events
    from misc.commands.commands_owner import register as register_owner
    from reminders.catalog import Event
    from reminders.optin_store import OptInRegistry
    from reminders.service import ReminderTickReport


TZ = ZoneInfo("America/New_York")
GUILD_ID = 123


class _FakeResponse:
    def __init__(self):
        self.calls: list[tuple[tuple, dict]] = []

    async def send_message(self, *args, **kwargs):
        self.calls.append((args, kwargs))


class _FakeInteraction:
    def __init__(self, user_id: int):
        self.user = SimpleNamespace(id=user_id)
        self.response = _FakeResponse()


class _StubService:
    def __init__(self, upcoming=None):
        self.upcoming = upcoming
        self.tz = TZ
        self.ticks = 0

    async def next_event(self):
        return self.upcoming

    def status_text(self) -> str:
        return "Reminder engine status:\n- enabled: True"

    async def run_tick(self):
        self.ticks += 1
        return ReminderTickReport(now=datetime(2025, 2, 6, 14, 0, tzinfo=TZ), event_id="lee", minutes_until=1440, fired=["24h"])


class _BrokenRegistry:
    def opt_in(self, user_id: int) -> bool:
        raise OSError("read-only file system")

    def opt_out(self, user_id: int) -> bool:
        raise OSError("read-only file system")

    def list_opted_in(self) -> set[int]:
        return set()


@unittest.skipIf(commands is None, "discord.py not installed")
class EventSlashCommandTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.registry = OptInRegistry(Path(self.tmp.name) / "optins.json")

    async def asyncTearDown(self):
        self.tmp.cleanup()

    def _bot(self, *, service=None, registry=None, guild_id: int = GUILD_ID):
        bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
        registered = register_events(
            bot,
            deps=CommandDeps(
                guild_id=guild_id,
                reminder_service=service or _StubService(),
                optin_registry=registry or self.registry,
                store_lock=asyncio.Lock(),
            ),
            gates=CommandGates(),
        )
        return bot, registered

    def _command(self, bot, name: str):
        cmd = bot.tree.get_command(name, guild=discord.Object(id=GUILD_ID))
        self.assertIsNotNone(cmd, f"missing slash command {name}")
        return cmd

    async def test_registration_requires_guild_id(self):
        with mock.patch("builtins.print"):
            bot, registered = self._bot(guild_id=0)
        self.assertFalse(registered)
        self.assertIsNone(bot.tree.get_command("remindme", guild=discord.Object(id=GUILD_ID)))

    async def test_remindme_then_remindoff_round_trip(self):
        bot, registered = self._bot()
        self.assertTrue(registered)

        interaction = _FakeInteraction(555)
        await self._command(bot, "remindme").callback(interaction)
        self.assertEqual(interaction.response.calls, [((OPTED_IN_TEXT,), {"ephemeral": True})])
        self.assertEqual(self.registry.list_opted_in(), {555})

        again = _FakeInteraction(555)
        await self._command(bot, "remindme").callback(again)
        self.assertEqual(self.registry.list_opted_in(), {555})

        off = _FakeInteraction(555)
        await self._command(bot, "remindoff").callback(off)
        self.assertEqual(off.response.calls, [((OPTED_OUT_TEXT,), {"ephemeral": True})])
        self.assertEqual(self.registry.list_opted_in(), set())

    async def test_remindoff_for_unknown_user_still_confirms(self):
        bot, _ = self._bot()
        interaction = _FakeInteraction(777)
        await self._command(bot, "remindoff").callback(interaction)
        self.assertEqual(interaction.response.calls, [((OPTED_OUT_TEXT,), {"ephemeral": True})])

    async def test_store_write_failure_replies_privately(self):
        bot, _ = self._bot(registry=_BrokenRegistry())
        interaction = _FakeInteraction(555)
        with mock.patch("builtins.print"):
            await self._command(bot, "remindme").callback(interaction)
        self.assertEqual(interaction.response.calls, [((OPTIN_FAILED_TEXT,), {"ephemeral": True})])

    async def test_nextevent_without_events(self):
        bot, _ = self._bot(service=_StubService(upcoming=None))
        interaction = _FakeInteraction(1)
        await self._command(bot, "nextevent").callback(interaction)
        self.assertEqual(interaction.response.calls, [((NO_UPCOMING_EVENTS_TEXT,), {"ephemeral": True})])

    async def test_nextevent_replies_with_embed(self):
        event = Event(event_id="lee", title="In The Clouds", start_text="2025-02-07T14:00", location="Piedmont Park")
        start = datetime(2025, 2, 7, 14, 0, tzinfo=TZ)
        bot, _ = self._bot(service=_StubService(upcoming=(event, start)))
        interaction = _FakeInteraction(1)
        await self._command(bot, "nextevent").callback(interaction)
        (args, kwargs), = interaction.response.calls
        self.assertTrue(kwargs["ephemeral"])
        self.assertEqual(kwargs["embed"].title, "In The Clouds")


class _FakeCtx:
    def __init__(self, author_id: int):
        self.author = SimpleNamespace(id=author_id)
        self.channel = SimpleNamespace(id=1)
        self.sent: list[str] = []

    async def send(self, text):
        self.sent.append(text)


@unittest.skipIf(commands is None, "discord.py not installed")
class OwnerReminderCommandTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.registry = OptInRegistry(Path(self.tmp.name) / "optins.json")
        self.registry.opt_in(10)
        self.registry.opt_in(11)
        self.service = _StubService()
        self.chunked: list[str] = []

        async def send_chunked(channel, text):
            self.chunked.append(text)

        self.bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
        register_owner(
            self.bot,
            deps=CommandDeps(
                send_chunked=send_chunked,
                reminder_service=self.service,
                optin_registry=self.registry,
                store_lock=asyncio.Lock(),
            ),
            gates=CommandGates(owner_user_ids={1}, user_is_owner=lambda user: user.id == 1),
        )

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def test_non_owner_is_blocked(self):
        for name in ("reminders.status", "reminders.check"):
            ctx = _FakeCtx(2)
            await self.bot.get_command(name).callback(ctx)
            self.assertEqual(ctx.sent, ["This command is owner-only."])
        self.assertEqual(self.service.ticks, 0)
        self.assertEqual(self.chunked, [])

    async def test_status_reports_opted_in_count(self):
        await self.bot.get_command("reminders.status").callback(_FakeCtx(1))
        self.assertEqual(len(self.chunked), 1)
        self.assertIn("- next_event: (none)", self.chunked[0])
        self.assertIn("- opted_in_users: 2", self.chunked[0])

    async def test_check_runs_one_tick(self):
        ctx = _FakeCtx(1)
        await self.bot.get_command("reminders.check").callback(ctx)
        self.assertEqual(self.service.ticks, 1)
        self.assertIn("fired=24h", ctx.sent[0])
        self.assertIn("event=lee", ctx.sent[0])


if __name__ == "__main__":
    unittest.main()
