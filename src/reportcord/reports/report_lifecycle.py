"""
Report filing workflow.

Both triggers (the message command and the report reaction) end up in
:meth:`ReportLifecycleManager.file`, which captures the message once and hands
moderators a decision request.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Union

import discord

from reportcord.configuration.report_settings import ReportSettings
from reportcord.datatypes.discord_datatypes import ChannelID, GuildID, UserID
from reportcord.datatypes.report_datatypes import ReportRecord
from reportcord.reports.attachment_snapshotter import AttachmentSnapshotter
from reportcord.reports.errors import ReportPublishError
from reportcord.reports.report_store import ReportStore
from reportcord.ui import messages
from reportcord.ui.report_embed import build_report_embed
from reportcord.ui.report_ui import ReportDecisionView
from reportcord.util import discord_utils
from reportcord.util.logger import get_logger

logger = get_logger("report_lifecycle")

ReporterNotifier = Callable[[str], Awaitable[None]]


class ReportLifecycleManager:
    """Files reports and publishes them to the moderation channel.

    Args:
        bot: Discord bot used to resolve the moderation channel
        store: Store receiving the new reports
        snapshotter: Downloads the reported message's attachments
        settings: Report workflow settings (moderation channel, excerpt limit)
    """

    def __init__(
        self,
        bot: discord.Bot,
        store: ReportStore,
        snapshotter: AttachmentSnapshotter,
        settings: ReportSettings,
    ) -> None:
        self.bot = bot
        self.store = store
        self.snapshotter = snapshotter
        self.settings = settings

    async def file(
        self,
        message: discord.Message,
        reporter: Union[discord.User, discord.Member],
        notify_reporter: ReporterNotifier,
    ) -> str:
        """
        File a report for ``message`` on behalf of ``reporter``.

        The reporter is acknowledged first. The message is then captured, stored
        and published to moderators, and finally removed from its channel when
        the bot is allowed to. Removal and attachment failures are logged and do
        not stop the report.

        Returns:
            str: ID of the new report

        Raises:
            ReportPublishError: If the summary could not be posted to the moderation channel.
        """
        await self._acknowledge(reporter, notify_reporter)

        attachments = await self.snapshotter.snapshot(message)
        record = ReportRecord(
            guild_id=GuildID.from_guild(message.guild),
            channel_id=ChannelID(message.channel.id),
            author_id=UserID.from_user(message.author),
            reporter_id=UserID.from_user(reporter),
            content=message.content,
            attachments=attachments,
        )
        report_id = self.store.create(record)
        logger.info(
            "[REPORT] Report %s filed by %s for message %s by %s in channel %s",
            report_id,
            reporter.id,
            message.id,
            message.author.id,
            message.channel.id,
        )

        try:
            moderation_channel = await self._publish_summary(record, message.author, reporter)
        except ReportPublishError:
            # Unreachable by moderators, so do not keep it pending
            self.store.delete(report_id)
            raise

        await self._remove_original(message)

        if record.has_attachments:
            await self._publish_attachments(moderation_channel, record)

        return report_id

    async def _acknowledge(self, reporter, notify_reporter: ReporterNotifier) -> None:
        try:
            await notify_reporter(messages.REPORT_ACKNOWLEDGEMENT)
        except Exception as exc:
            logger.warning("[REPORT] Could not acknowledge report to %s: %s", reporter.id, exc)

    async def _remove_original(self, message: discord.Message) -> None:
        if not discord_utils.bot_can_manage_messages(message.channel):
            logger.warning(
                "[REPORT] Missing Manage Messages in channel %s; message %s stays visible",
                message.channel.id,
                message.id,
            )
            return

        if await discord_utils.safe_delete_message(message):
            logger.debug("[REPORT] Removed reported message %s", message.id)

    async def _resolve_moderation_channel(self, report_id: str) -> discord.abc.Messageable:
        channel_id = self.settings.moderation_channel_id
        if channel_id is None:
            raise ReportPublishError(report_id, "no moderation channel is configured")

        channel = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except discord.HTTPException as exc:
                raise ReportPublishError(report_id, f"moderation channel {channel_id} unavailable ({exc})") from exc

        # Categories and forum channels cannot take messages
        if not callable(getattr(channel, "send", None)):
            raise ReportPublishError(report_id, f"moderation channel {channel_id} cannot receive messages")
        return channel

    async def _publish_summary(self, record: ReportRecord, author, reporter) -> discord.abc.Messageable:
        channel = await self._resolve_moderation_channel(record.report_id)
        embed = build_report_embed(record, author, reporter, self.settings.content_excerpt_limit)

        view = ReportDecisionView(record.report_id)
        try:
            await channel.send(embed=embed, view=view)
        except discord.HTTPException as exc:
            raise ReportPublishError(record.report_id, f"summary send failed ({exc})") from exc
        finally:
            view.stop()

        logger.info("[REPORT] Published report %s to moderation channel %s", record.report_id, channel.id)
        return channel

    async def _publish_attachments(self, channel: discord.abc.Messageable, record: ReportRecord) -> None:
        try:
            await channel.send(
                content=messages.ATTACHMENTS_FOLLOW_UP.format(report_id=record.report_id),
                files=discord_utils.build_discord_files(record.attachments),
            )
        except discord.HTTPException as exc:
            logger.error("[REPORT] Failed to publish attachments for report %s: %s", record.report_id, exc)
