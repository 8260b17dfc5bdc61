import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import (
    AUTHOR_ID,
    EMOJI_ID,
    GUILD_ID,
    MOD_CHANNEL_ID,
    ORIGIN_CHANNEL_ID,
    REPORTER_ID,
    http_error,
    make_channel,
    make_member,
    make_message,
    make_user,
)
from reportcord.cog.listener.reaction_listener import ReactionListenerCog
from reportcord.configuration.report_settings import ReportSettings
from reportcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, UserID
from reportcord.datatypes.report_datatypes import ReactionTriggerEvent
from reportcord.reports.attachment_snapshotter import AttachmentSnapshotter
from reportcord.reports.errors import ReportPublishError
from reportcord.reports.report_lifecycle import ReportLifecycleManager
from reportcord.reports.report_store import ReportStore
from reportcord.reports.trigger_deduplicator import TriggerDeduplicator
from reportcord.ui import messages

MESSAGE_ID = 444555666


def make_event(
    message_id=MESSAGE_ID,
    user_id=REPORTER_ID,
    guild_id=GUILD_ID,
    emoji_id=EMOJI_ID,
    emoji_name="report",
    user_is_bot=False,
) -> ReactionTriggerEvent:
    return ReactionTriggerEvent(
        message_id=MessageID(message_id),
        channel_id=ChannelID(ORIGIN_CHANNEL_ID),
        guild_id=GuildID(guild_id) if guild_id is not None else None,
        user_id=UserID(user_id),
        user_is_bot=user_is_bot,
        emoji_id=emoji_id,
        emoji_name=emoji_name,
    )


@pytest.fixture
def lifecycle():
    mock = MagicMock()
    mock.file = AsyncMock(return_value="abc12345")
    return mock


@pytest.fixture
def reported_message(origin_channel):
    message = make_message(content="hello", channel=origin_channel)
    origin_channel.fetch_message.return_value = message
    return message


@pytest.fixture
def cog(fake_bot, lifecycle, report_settings, reported_message):
    return ReactionListenerCog(fake_bot, lifecycle, TriggerDeduplicator(), report_settings)


@pytest.fixture
def reporter():
    return make_member(REPORTER_ID)


@pytest.mark.asyncio
async def test_matching_reaction_files_report(cog, lifecycle, reporter, reported_message):
    filed = await cog.handle_reaction(make_event(), reporter)

    assert filed is True
    lifecycle.file.assert_awaited_once()
    message, filed_by, notifier = lifecycle.file.await_args.args
    assert message is reported_message
    assert filed_by is reporter

    await notifier("thanks")
    reporter.send.assert_awaited_once_with("thanks")


@pytest.mark.asyncio
async def test_repeated_reactions_file_once(cog, lifecycle):
    results = []
    for user_id in (REPORTER_ID, 10, 11, REPORTER_ID):
        results.append(await cog.handle_reaction(make_event(user_id=user_id), make_member(user_id)))

    assert results == [True, False, False, False]
    lifecycle.file.assert_awaited_once()


@pytest.mark.asyncio
async def test_concurrent_reactions_file_once(cog, fake_bot, lifecycle):
    fake_bot.fetch_user.return_value = make_user(REPORTER_ID, "reporter")

    async def slow_file(*_args):
        await asyncio.sleep(0)
        return "abc12345"

    lifecycle.file.side_effect = slow_file

    results = await asyncio.gather(
        *(cog.handle_reaction(make_event(user_id=100 + i)) for i in range(10))
    )

    assert results.count(True) == 1
    lifecycle.file.assert_awaited_once()


@pytest.mark.asyncio
async def test_distinct_messages_are_reported_separately(cog, lifecycle, reporter):
    await cog.handle_reaction(make_event(message_id=1), reporter)
    await cog.handle_reaction(make_event(message_id=2), reporter)

    assert lifecycle.file.await_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event",
    [
        make_event(emoji_id=42, emoji_name="thumbsup"),
        make_event(emoji_id=42, emoji_name="report"),
        make_event(emoji_id=None, emoji_name="👍"),
        make_event(guild_id=None),
        make_event(user_is_bot=True),
        make_event(user_id=999),
    ],
    ids=["other-emoji", "same-name-other-id", "unicode", "direct-message", "bot-user", "bot-itself"],
)
async def test_ignored_reactions_never_file(cog, lifecycle, event):
    filed = await cog.handle_reaction(event)

    assert filed is False
    lifecycle.file.assert_not_awaited()
    assert MessageID(MESSAGE_ID) not in cog.deduplicator


@pytest.mark.asyncio
async def test_name_marker_used_without_configured_id(fake_bot, lifecycle, reported_message, reporter):
    settings = ReportSettings({"trigger_emoji_name": "report"})
    cog = ReactionListenerCog(fake_bot, lifecycle, TriggerDeduplicator(), settings)

    assert await cog.handle_reaction(make_event(emoji_id=None, emoji_name="report"), reporter) is True
    assert await cog.handle_reaction(make_event(message_id=2, emoji_id=None, emoji_name="nope"), reporter) is False


@pytest.mark.asyncio
async def test_reporter_resolved_from_api_when_not_cached(cog, fake_bot, lifecycle):
    fake_bot.fetch_user.return_value = make_user(REPORTER_ID, "reporter")

    assert await cog.handle_reaction(make_event()) is True

    fake_bot.fetch_user.assert_awaited_once_with(REPORTER_ID)


@pytest.mark.asyncio
async def test_unavailable_message_is_skipped(cog, origin_channel, lifecycle, reporter):
    origin_channel.fetch_message.side_effect = http_error(discord.NotFound, 404, "Unknown Message")

    assert await cog.handle_reaction(make_event(), reporter) is False
    lifecycle.file.assert_not_awaited()


@pytest.mark.asyncio
async def test_publish_failure_tells_reporter(cog, lifecycle, reporter):
    lifecycle.file.side_effect = ReportPublishError("abc12345", "summary send failed")

    assert await cog.handle_reaction(make_event(), reporter) is False

    reporter.send.assert_awaited_once_with(messages.REPORT_FAILED)


@pytest.mark.asyncio
async def test_raw_payload_is_routed(cog, lifecycle, reporter):
    payload = SimpleNamespace(
        message_id=MESSAGE_ID,
        channel_id=ORIGIN_CHANNEL_ID,
        guild_id=GUILD_ID,
        user_id=REPORTER_ID,
        member=reporter,
        emoji=SimpleNamespace(id=EMOJI_ID, name="report"),
    )

    await cog.on_raw_reaction_add(payload)

    lifecycle.file.assert_awaited_once()


@pytest.mark.asyncio
async def test_raw_payload_errors_are_contained(cog, lifecycle, reporter):
    lifecycle.file.side_effect = RuntimeError("boom")
    payload = SimpleNamespace(
        message_id=MESSAGE_ID,
        channel_id=ORIGIN_CHANNEL_ID,
        guild_id=GUILD_ID,
        user_id=REPORTER_ID,
        member=reporter,
        emoji=SimpleNamespace(id=EMOJI_ID, name="report"),
    )

    await cog.on_raw_reaction_add(payload)

    lifecycle.file.assert_awaited_once()


@pytest.mark.asyncio
async def test_reaction_report_without_manage_messages(report_settings):
    origin = make_channel(ORIGIN_CHANNEL_ID, can_manage=False)
    mod_channel = make_channel(MOD_CHANNEL_ID)
    channels = {ORIGIN_CHANNEL_ID: origin, MOD_CHANNEL_ID: mod_channel}
    bot = SimpleNamespace(
        user=SimpleNamespace(id=999),
        get_channel=MagicMock(side_effect=channels.get),
        fetch_channel=AsyncMock(),
        get_user=MagicMock(return_value=None),
        fetch_user=AsyncMock(),
    )
    message = make_message(content="hello", channel=origin, author=make_user(AUTHOR_ID, "author"))
    origin.fetch_message.return_value = message
    store = ReportStore()
    lifecycle = ReportLifecycleManager(bot, store, AttachmentSnapshotter(), report_settings)
    cog = ReactionListenerCog(bot, lifecycle, TriggerDeduplicator(), report_settings)
    reporter = make_member(REPORTER_ID)

    assert await cog.handle_reaction(make_event(), reporter) is True

    reporter.send.assert_awaited_once_with(messages.REPORT_ACKNOWLEDGEMENT)
    message.delete.assert_not_awaited()
    mod_channel.send.assert_awaited_once()
    embed = mod_channel.send.await_args.kwargs["embed"]
    assert {field.name: field.value for field in embed.fields}["Content"] == "hello"
    assert len(store) == 1
