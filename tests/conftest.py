"""
Pytest configuration and fixtures for Reportcord tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from reportcord.configuration.report_settings import ReportSettings  # noqa: E402

GUILD_ID = 987654321
ORIGIN_CHANNEL_ID = 123456
MOD_CHANNEL_ID = 555666777
MOD_ROLE_ID = 888999000
AUTHOR_ID = 111222333
REPORTER_ID = 444000111
MODERATOR_ID = 777000222
EMOJI_ID = 1455371157883584624


def make_user(user_id: int, name: str = "user", bot: bool = False):
    user = SimpleNamespace(id=user_id, name=name, bot=bot, send=AsyncMock())
    user.mention = f"<@{user_id}>"
    return user


def make_member(user_id: int, role_ids=(), bot: bool = False):
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.bot = bot
    member.roles = [SimpleNamespace(id=role_id) for role_id in role_ids]
    member.send = AsyncMock()
    return member


def make_attachment(filename: str, url: str | None = None):
    return SimpleNamespace(filename=filename, url=url or f"https://cdn.example/{filename}")


def make_channel(channel_id: int, can_manage: bool = True):
    me = SimpleNamespace(id=999)
    guild = SimpleNamespace(id=GUILD_ID, name="Test Guild", me=me)
    permissions = SimpleNamespace(read_messages=True, manage_messages=can_manage)
    return SimpleNamespace(
        id=channel_id,
        guild=guild,
        permissions_for=MagicMock(return_value=permissions),
        send=AsyncMock(),
        fetch_message=AsyncMock(),
    )


def make_message(content="hello", attachments=None, author=None, channel=None, message_id=444555666):
    channel = channel or make_channel(ORIGIN_CHANNEL_ID)
    return SimpleNamespace(
        id=message_id,
        content=content,
        attachments=list(attachments or []),
        author=author or make_user(AUTHOR_ID, "author"),
        channel=channel,
        guild=channel.guild,
        delete=AsyncMock(),
    )


@pytest.fixture
def report_settings():
    return ReportSettings(
        {
            "moderation_channel_id": MOD_CHANNEL_ID,
            "moderator_role_id": MOD_ROLE_ID,
            "trigger_emoji_id": EMOJI_ID,
            "trigger_emoji_name": "report",
        }
    )


@pytest.fixture
def mod_channel():
    return make_channel(MOD_CHANNEL_ID)


@pytest.fixture
def origin_channel():
    return make_channel(ORIGIN_CHANNEL_ID)


@pytest.fixture
def fake_bot(mod_channel, origin_channel):
    channels = {MOD_CHANNEL_ID: mod_channel, ORIGIN_CHANNEL_ID: origin_channel}
    return SimpleNamespace(
        user=SimpleNamespace(id=999),
        get_channel=MagicMock(side_effect=channels.get),
        fetch_channel=AsyncMock(),
        get_user=MagicMock(return_value=None),
        fetch_user=AsyncMock(),
    )


def http_error(error_cls, status: int, text: str = "error"):
    """Build a discord HTTPException subclass the way the client raises it."""
    response = MagicMock()
    response.status = status
    response.reason = text
    return error_cls(response, text)
