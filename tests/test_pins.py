from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest import mock

try:
    import discord
except ModuleNotFoundError:
    discord = None

if discord is not None:
    from misc.adhoc_modules.pins import ensure_pinned_message
    from misc.adhoc_modules.pins import fit_with_marker


MARKER = "CC_TEST_PIN_V1"
BOT_ID = 900


class _FakeMessage:
    def __init__(self, content: str, author_id: int, *, pin_error: Exception | None = None):
        self.content = content
        self.author = SimpleNamespace(id=author_id)
        self.pinned = False
        self.pin_error = pin_error

    async def pin(self):
        if self.pin_error is not None:
            raise self.pin_error
        self.pinned = True


class _FakeChannel:
    def __init__(self, pinned: list[_FakeMessage] | None = None, *, pin_error: Exception | None = None):
        self.id = 77
        self.pinned = list(pinned or [])
        self.sent: list[_FakeMessage] = []
        self.pin_error = pin_error

    async def pins(self):
        for msg in self.pinned:
            yield msg

    async def send(self, text):
        msg = _FakeMessage(text, BOT_ID, pin_error=self.pin_error)
        self.sent.append(msg)
        return msg


class _FakeBot:
    def __init__(self, channel):
        self.user = SimpleNamespace(id=BOT_ID)
        self.channel = channel

    def get_channel(self, channel_id):
        return self.channel if channel_id == 77 else None

    async def fetch_channel(self, channel_id):
        raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Channel")


@unittest.skipIf(discord is None, "discord.py not installed")
class EnsurePinnedMessageTests(unittest.IsolatedAsyncioTestCase):
    async def test_posts_and_pins_when_marker_absent(self):
        channel = _FakeChannel()
        posted = await ensure_pinned_message(
            _FakeBot(channel), channel_id=77, text=f"hello\n{MARKER}", marker=MARKER, label="test"
        )
        self.assertTrue(posted)
        self.assertEqual(len(channel.sent), 1)
        self.assertTrue(channel.sent[0].pinned)

    async def test_existing_bot_pin_with_marker_skips(self):
        channel = _FakeChannel([_FakeMessage(f"old text {MARKER}", BOT_ID)])
        posted = await ensure_pinned_message(
            _FakeBot(channel), channel_id=77, text=f"new\n{MARKER}", marker=MARKER, label="test"
        )
        self.assertFalse(posted)
        self.assertEqual(channel.sent, [])

    async def test_marker_pinned_by_someone_else_does_not_count(self):
        channel = _FakeChannel([_FakeMessage(f"copied {MARKER}", 12345)])
        posted = await ensure_pinned_message(
            _FakeBot(channel), channel_id=77, text=f"new\n{MARKER}", marker=MARKER, label="test"
        )
        self.assertTrue(posted)

    async def test_missing_channel_is_skipped(self):
        with mock.patch("builtins.print"):
            self.assertFalse(
                await ensure_pinned_message(_FakeBot(None), channel_id=0, text="x", marker=MARKER, label="test")
            )
            self.assertFalse(
                await ensure_pinned_message(_FakeBot(None), channel_id=55, text="x", marker=MARKER, label="test")
            )

    async def test_pin_permission_failure_keeps_message(self):
        channel = _FakeChannel(
            pin_error=discord.Forbidden(SimpleNamespace(status=403, reason="Forbidden"), "Missing Permissions")
        )
        with mock.patch("builtins.print") as printed:
            posted = await ensure_pinned_message(
                _FakeBot(channel), channel_id=77, text=f"hi {MARKER}", marker=MARKER, label="test"
            )
        self.assertTrue(posted)
        self.assertEqual(len(channel.sent), 1)
        self.assertTrue(any("could not pin" in str(c) for c in printed.call_args_list))

    async def test_oversized_text_keeps_marker_and_is_not_reposted(self):
        channel = _FakeChannel()
        bot = _FakeBot(channel)
        text = ("line of event listing\n" * 200) + MARKER
        self.assertGreater(len(text), 2000)

        first = await ensure_pinned_message(bot, channel_id=77, text=text, marker=MARKER, label="test")
        channel.pinned = [m for m in channel.sent if m.pinned]
        second = await ensure_pinned_message(bot, channel_id=77, text=text, marker=MARKER, label="test")

        self.assertTrue(first)
        self.assertFalse(second)
        self.assertEqual(len(channel.sent), 1)
        self.assertLessEqual(len(channel.sent[0].content), 2000)
        self.assertTrue(channel.sent[0].content.endswith(MARKER))


@unittest.skipIf(discord is None, "discord.py not installed")
class FitWithMarkerTests(unittest.TestCase):
    def test_short_text_unchanged(self):
        self.assertEqual(fit_with_marker(f"hi {MARKER}", MARKER), f"hi {MARKER}")

    def test_cut_text_ends_with_marker(self):
        out = fit_with_marker("x" * 50 + MARKER, MARKER, limit=30)
        self.assertEqual(len(out), 30)
        self.assertTrue(out.endswith("\n" + MARKER))


if __name__ == "__main__":
    unittest.main()
