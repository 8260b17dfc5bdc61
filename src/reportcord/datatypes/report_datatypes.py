"""
Report data structures for the moderation report workflow.

This module defines the pending report record, the decision enums, the tagged
control ID carried by the moderator buttons, and the narrowed reaction event
consumed by the reaction trigger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List

from reportcord.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, UserID

# Shown wherever a reported message had no text
EMPTY_CONTENT_PLACEHOLDER = "[no text]"
DEFAULT_ATTACHMENT_NAME = "file"

CONTROL_ID_PREFIX = "report"
CONTROL_ID_SEPARATOR = ":"


class ReportAction(Enum):
    """Decision a moderator can take on a pending report."""

    APPROVE = "approve"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class DecisionOutcome(Enum):
    """Result of a decision attempt."""

    APPROVED = "approved"
    DELETED = "deleted"
    UNKNOWN_REPORT = "unknown_report"
    UNAUTHORIZED = "unauthorized"

    @property
    def is_resolution(self) -> bool:
        return self in (DecisionOutcome.APPROVED, DecisionOutcome.DELETED)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ReportAttachment:
    """A downloaded attachment kept with a pending report."""

    name: str
    data: bytes


@dataclass(slots=True)
class ReportRecord:
    """A pending moderation report.

    Attributes:
        guild_id: Guild the reported message was posted in
        channel_id: Channel the reported message was posted in
        author_id: Author of the reported message
        reporter_id: User who filed the report
        report_id: Short token assigned by the report store on insertion
        content: Message text at capture time, or the placeholder when empty
        attachments: Successfully downloaded attachments, in original order
        created_at: Time the report was filed
    """

    guild_id: GuildID
    channel_id: ChannelID
    author_id: UserID
    reporter_id: UserID
    report_id: str = ""
    content: str = EMPTY_CONTENT_PLACEHOLDER
    attachments: List[ReportAttachment] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.content:
            self.content = EMPTY_CONTENT_PLACEHOLDER

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)


@dataclass(frozen=True, slots=True)
class DecisionControlID:
    """Action and report ID encoded in a decision button's custom ID.

    The wire form is ``report:<action>:<report_id>``. Only :meth:`parse` output
    is trusted by the decision listener; anything that does not round-trip is
    treated as a foreign component.
    """

    action: ReportAction
    report_id: str

    def encode(self) -> str:
        return CONTROL_ID_SEPARATOR.join((CONTROL_ID_PREFIX, self.action.value, self.report_id))

    @classmethod
    def parse(cls, custom_id: str | None) -> "DecisionControlID | None":
        """Parse a component custom ID, returning None when it is not a report control."""
        if not custom_id:
            return None

        parts = custom_id.split(CONTROL_ID_SEPARATOR)
        if len(parts) != 3 or parts[0] != CONTROL_ID_PREFIX:
            return None

        _, raw_action, report_id = parts
        try:
            action = ReportAction(raw_action)
        except ValueError:
            return None

        if not report_id or not report_id.isalnum():
            return None
        return cls(action=action, report_id=report_id)


@dataclass(frozen=True, slots=True)
class ReactionTriggerEvent:
    """Reaction-add event narrowed to the fields the report trigger needs."""

    message_id: MessageID
    channel_id: ChannelID
    guild_id: GuildID | None
    user_id: UserID
    user_is_bot: bool
    emoji_id: int | None
    emoji_name: str | None

    @property
    def in_guild(self) -> bool:
        return self.guild_id is not None

    def matches_marker(self, marker_id: int | None, marker_name: str) -> bool:
        """Return True when the reacted emoji is the configured report marker.

        A configured emoji ID is authoritative; the name is only compared when
        no ID is configured.
        """
        if marker_id is not None:
            return self.emoji_id == marker_id
        return self.emoji_name == marker_name

    @classmethod
    def from_payload(cls, payload) -> "ReactionTriggerEvent":
        """Build the event from a ``discord.RawReactionActionEvent``."""
        member = getattr(payload, "member", None)
        emoji = payload.emoji
        return cls(
            message_id=MessageID(payload.message_id),
            channel_id=ChannelID(payload.channel_id),
            guild_id=GuildID(payload.guild_id) if payload.guild_id is not None else None,
            user_id=UserID(payload.user_id),
            user_is_bot=bool(getattr(member, "bot", False)),
            emoji_id=getattr(emoji, "id", None),
            emoji_name=getattr(emoji, "name", None),
        )
