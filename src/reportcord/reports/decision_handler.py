"""
Moderator decisions on pending reports.

A report moves from pending to exactly one of two terminal states: approved
(the message is restored in its channel) or deleted (the author is told by DM).
The report leaves the store as part of the decision, so a repeated click on
the same report finds nothing and gets the unknown-report answer.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Union

import discord

from reportcord.configuration.report_settings import ReportSettings
from reportcord.datatypes.report_datatypes import DecisionOutcome, ReportAction, ReportRecord
from reportcord.reports.report_store import ReportStore
from reportcord.ui import messages
from reportcord.util import discord_utils
from reportcord.util.logger import get_logger

logger = get_logger("decision_handler")

# Called with the outcome and whether the author was reached by DM
SurfaceRenderer = Callable[[DecisionOutcome, bool], Awaitable[None]]


class DecisionHandler:
    """Applies approve/delete decisions taken from the moderation channel.

    Args:
        bot: Discord bot used to resolve channels and users
        store: Store holding the pending reports
        settings: Report workflow settings (moderator role)
    """

    def __init__(self, bot: discord.Bot, store: ReportStore, settings: ReportSettings) -> None:
        self.bot = bot
        self.store = store
        self.settings = settings

    async def decide(
        self,
        report_id: str,
        action: ReportAction,
        acting_user: Union[discord.User, discord.Member],
        guild: discord.Guild | None,
        render_surface: SurfaceRenderer,
    ) -> DecisionOutcome:
        """
        Apply ``action`` to the report if ``acting_user`` is a moderator.

        Returns:
            DecisionOutcome: APPROVED or DELETED when the report was resolved,
            UNKNOWN_REPORT when it is not pending (already resolved, or lost in a
            restart), UNAUTHORIZED when the user lacks the moderator role. The
            last two leave the store untouched.
        """
        if self.store.get(report_id) is None:
            logger.info("[DECISION] %s on unknown report %s by %s", action, report_id, acting_user.id)
            return DecisionOutcome.UNKNOWN_REPORT

        if not await self.is_moderator(acting_user, guild):
            logger.info("[DECISION] User %s is not allowed to %s report %s", acting_user.id, action, report_id)
            return DecisionOutcome.UNAUTHORIZED

        # The authorization check may have awaited; another decision could have won meanwhile
        record = self.store.delete(report_id)
        if record is None:
            logger.info("[DECISION] Report %s was resolved concurrently", report_id)
            return DecisionOutcome.UNKNOWN_REPORT

        if action == ReportAction.APPROVE:
            await self._restore(record)
            outcome, author_notified = DecisionOutcome.APPROVED, False
        else:
            author_notified = await self._notify_author(record, guild)
            outcome = DecisionOutcome.DELETED

        logger.info("[DECISION] Report %s %s by %s", report_id, outcome, acting_user.id)
        await self._render(render_surface, outcome, author_notified, report_id)
        return outcome

    async def is_moderator(
        self,
        user: Union[discord.User, discord.Member],
        guild: discord.Guild | None,
    ) -> bool:
        """Return True when the user holds the configured moderator role in ``guild``."""
        role_id = self.settings.moderator_role_id
        if role_id is None:
            logger.warning("[DECISION] No moderator role configured; rejecting decision")
            return False

        member = user
        if not isinstance(member, discord.Member):
            if guild is None:
                return False
            try:
                member = await guild.fetch_member(user.id)
            except discord.HTTPException as exc:
                logger.debug("[DECISION] Could not fetch member %s: %s", user.id, exc)
                return False

        return discord_utils.member_has_role(member, role_id)

    async def _restore(self, record: ReportRecord) -> None:
        """Re-post the reported message in its original channel.

        When header and content together exceed the message limit, the header
        goes out alone and the content follows in as many messages as needed.
        On failure the report is put back so a moderator can retry or delete it.
        """
        header = messages.RESTORED_HEADER.format(author_id=record.author_id)
        content = f"{header}\n\n{record.content}"
        if len(content) <= discord_utils.MESSAGE_CHAR_LIMIT:
            parts = [content]
        else:
            parts = [header, *discord_utils.split_message_text(record.content)]

        try:
            channel = self.bot.get_channel(record.channel_id.to_int())
            if channel is None:
                channel = await self.bot.fetch_channel(record.channel_id.to_int())

            for part in parts[:-1]:
                await channel.send(content=part)
            # Files ride on the last part
            if record.has_attachments:
                await channel.send(content=parts[-1], files=discord_utils.build_discord_files(record.attachments))
            else:
                await channel.send(content=parts[-1])
        except discord.HTTPException:
            self.store.reinstate(record)
            raise

        logger.debug("[DECISION] Restored report %s in channel %s", record.report_id, record.channel_id)

    async def _notify_author(self, record: ReportRecord, guild: discord.Guild | None) -> bool:
        guild_name = guild.name if guild is not None else "the server"
        try:
            author = await self.bot.fetch_user(record.author_id.to_int())
        except discord.HTTPException as exc:
            logger.warning("[DECISION] Could not fetch author %s of report %s: %s", record.author_id, record.report_id, exc)
            return False

        sent = await discord_utils.send_dm_to_user(author, messages.REMOVAL_NOTICE.format(guild_name=guild_name))
        if not sent:
            logger.warning("[DECISION] Author %s of report %s was not notified", record.author_id, record.report_id)
        return sent

    async def _render(self, render_surface: SurfaceRenderer, outcome: DecisionOutcome, author_notified: bool, report_id: str) -> None:
        try:
            await render_surface(outcome, author_notified)
        except discord.HTTPException as exc:
            logger.error("[DECISION] Failed to update decision message for report %s: %s", report_id, exc)
