"""
Report embed builders for the moderation channel.

These functions only build embeds; they contain no workflow logic.

Key Functions:
- build_report_embed: Summary posted when a report is filed
- build_resolved_report_embed: Copy of the summary annotated with the decision
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Union

import discord

from reportcord.datatypes.report_datatypes import (
    DecisionOutcome,
    EMPTY_CONTENT_PLACEHOLDER,
    ReportRecord,
)
from reportcord.util.discord_utils import truncate_text

REPORT_COLOR = discord.Color(0xFFCC00)
APPROVED_COLOR = discord.Color(0x00AA00)
DELETED_COLOR = discord.Color(0xDD0000)

OUTCOME_FIELD_NAME = "Outcome"


def describe_user(user: Union[discord.User, discord.Member]) -> str:
    return f"{user} (<@{user.id}>)"


def build_report_embed(
    record: ReportRecord,
    author: Union[discord.User, discord.Member],
    reporter: Union[discord.User, discord.Member],
    excerpt_limit: int = 1024,
) -> discord.Embed:
    """
    Build the moderator-facing summary of a new report.

    Args:
        record: The stored report, with its ID already assigned
        author: Author of the reported message
        reporter: User who filed the report
        excerpt_limit: Maximum number of content characters shown

    Returns:
        discord.Embed: Summary embed for the moderation channel
    """
    embed = discord.Embed(
        title="New message report",
        color=REPORT_COLOR,
        timestamp=record.created_at or datetime.now(timezone.utc),
    )
    embed.add_field(name="Report ID", value=record.report_id, inline=True)
    embed.add_field(name="Original channel", value=f"<#{record.channel_id}>", inline=True)
    embed.add_field(name="Message author", value=describe_user(author), inline=False)
    embed.add_field(name="Reported by", value=describe_user(reporter), inline=False)
    embed.add_field(
        name="Content",
        value=truncate_text(record.content, excerpt_limit) or EMPTY_CONTENT_PLACEHOLDER,
        inline=False,
    )
    if record.attachments:
        embed.add_field(name="Attachments", value=str(len(record.attachments)), inline=True)

    embed.set_footer(text=f"Reportcord | Report: {record.report_id}")
    return embed


def build_resolved_report_embed(
    original_embed: discord.Embed | None,
    outcome: DecisionOutcome,
    resolved_by: Union[discord.User, discord.Member],
    author_notified: bool = True,
) -> discord.Embed:
    """
    Build the resolved version of a report summary.

    The original fields are kept and an outcome field is appended.
    """
    if original_embed is not None:
        embed = discord.Embed.from_dict(original_embed.to_dict())
    else:
        embed = discord.Embed(title="Message report", timestamp=datetime.now(timezone.utc))

    if outcome == DecisionOutcome.APPROVED:
        embed.color = APPROVED_COLOR
        result = f"Approved by {resolved_by}"
    else:
        embed.color = DELETED_COLOR
        result = f"Deleted by {resolved_by}"
        result += " and author notified by DM" if author_notified else " (author could not be notified by DM)"

    embed.add_field(name=OUTCOME_FIELD_NAME, value=result, inline=False)
    return embed
