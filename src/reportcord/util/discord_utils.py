"""
discord_utils.py
================

Low-level Discord utility functions for Reportcord.

This module provides stateless helpers for Discord-specific operations used by
the report workflow: permission and role checks, safe message deletion, direct
messages and file payloads. None of these helpers keep state.
"""

import io
from typing import Iterable, List, Union

import discord

from reportcord.datatypes.report_datatypes import DEFAULT_ATTACHMENT_NAME, ReportAttachment
from reportcord.util.logger import get_logger

logger = get_logger("discord_utils")

MESSAGE_CHAR_LIMIT = 2000


def bot_can_manage_messages(channel: discord.abc.GuildChannel) -> bool:
    """
    Determine if the bot may read and delete other users' messages in a channel.

    Args:
        channel (discord.abc.GuildChannel): The channel to check permissions for.

    Returns:
        bool: True if the bot can read and manage messages, False otherwise.
    """
    guild = getattr(channel, "guild", None)
    me = getattr(guild, "me", None)
    if me is None:
        return False

    try:
        permissions = channel.permissions_for(me)
    except Exception:  # pragma: no cover - discord internals guard
        return False

    return bool(permissions.read_messages and permissions.manage_messages)


def member_has_role(member: Union[discord.Member, discord.User, None], role_id: int | None) -> bool:
    """
    Check whether a guild member holds the given role.

    Plain users (outside a guild) and an unconfigured role never match.
    """
    if role_id is None or not isinstance(member, discord.Member):
        return False
    return any(role.id == role_id for role in member.roles)


async def safe_delete_message(message: discord.Message) -> bool:
    """
    Attempt to delete a Discord message, suppressing recoverable errors.

    Args:
        message (discord.Message): The message to delete.

    Returns:
        bool: True if deletion succeeded, False otherwise.
    """
    try:
        await message.delete()
        return True
    except discord.NotFound:
        logger.debug("Message %s was already deleted", message.id)
    except discord.Forbidden:
        logger.warning("No permission to delete message %s", message.id)
    except discord.HTTPException as exc:
        logger.error("Error deleting message %s: %s", message.id, exc)
    return False


async def send_dm_to_user(user: Union[discord.User, discord.Member], message: str) -> bool:
    """
    Attempt to send a direct message to a user.

    Args:
        user: The user to DM.
        message (str): The message content.

    Returns:
        bool: True if DM sent successfully, False otherwise.
    """
    try:
        await user.send(message)
        return True
    except discord.Forbidden:
        logger.info("Could not DM %s: They may have DMs disabled.", user)
    except discord.HTTPException as exc:
        logger.error("Failed to send DM to %s: %s", user, exc)
    return False


def build_discord_files(attachments: Iterable[ReportAttachment]) -> List[discord.File]:
    """
    Turn captured attachments into fresh ``discord.File`` objects.

    A ``discord.File`` can only be sent once, so a new one is built for every send.
    """
    return [
        discord.File(fp=io.BytesIO(item.data), filename=item.name or DEFAULT_ATTACHMENT_NAME)
        for item in attachments
    ]


def split_message_text(text: str, limit: int = MESSAGE_CHAR_LIMIT) -> List[str]:
    """
    Split ``text`` into pieces Discord accepts as message content.

    Pieces break after the last newline that fits, or hard at ``limit`` when a
    single line is longer than that.
    """
    chunks: List[str] = []
    while len(text) > limit:
        cut = text.rfind("\n", 0, limit + 1)
        if cut <= 0:
            chunks.append(text[:limit])
            text = text[limit:]
        else:
            chunks.append(text[:cut])
            text = text[cut + 1:]
    if text:
        chunks.append(text)
    return chunks


def truncate_text(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters."""
    if limit <= 0:
        return ""
    return text if len(text) <= limit else text[:limit]
