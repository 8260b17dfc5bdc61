"""Reaction listener Cog for Reportcord.

This cog has exactly ONE responsibility: turn a report-emoji reaction into a
report filing, at most once per message.
"""

from typing import Union

import discord
from discord.ext import commands

from reportcord.configuration.report_settings import ReportSettings
from reportcord.datatypes.report_datatypes import ReactionTriggerEvent
from reportcord.reports.errors import ReportError
from reportcord.reports.report_lifecycle import ReportLifecycleManager
from reportcord.reports.trigger_deduplicator import TriggerDeduplicator
from reportcord.ui import messages
from reportcord.util import discord_utils
from reportcord.util.logger import get_logger

logger = get_logger("reaction_listener")


class ReactionListenerCog(commands.Cog):
    """
    Files reports from reactions with the configured report emoji.

    Uses the raw reaction event so reactions on messages outside the cache are
    seen too.
    """

    def __init__(
        self,
        bot: discord.Bot,
        lifecycle: ReportLifecycleManager,
        deduplicator: TriggerDeduplicator,
        settings: ReportSettings,
    ) -> None:
        self.bot = bot
        self.lifecycle = lifecycle
        self.deduplicator = deduplicator
        self.settings = settings
        logger.info("[REACTION LISTENER] Reaction listener cog loaded")

    @commands.Cog.listener(name="on_raw_reaction_add")
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        try:
            await self.handle_reaction(ReactionTriggerEvent.from_payload(payload), payload.member)
        except Exception:
            logger.exception("[REACTION LISTENER] Error while handling reaction on message %s", payload.message_id)

    async def handle_reaction(
        self,
        event: ReactionTriggerEvent,
        member: discord.Member | None = None,
    ) -> bool:
        """Process one reaction event. Returns True when a report was filed."""
        if not event.in_guild or event.user_is_bot:
            return False
        if self.bot.user is not None and event.user_id == self.bot.user.id:
            return False
        if not event.matches_marker(self.settings.trigger_emoji_id, self.settings.trigger_emoji_name):
            return False

        reporter = member or await self._resolve_user(event)
        if reporter is None or reporter.bot:
            return False

        # Claim before the first await that follows, so a second reaction cannot slip in
        if not self.deduplicator.claim(event.message_id):
            return False

        message = await self._fetch_message(event)
        if message is None:
            return False

        async def notify_reporter(text: str) -> None:
            await discord_utils.send_dm_to_user(reporter, text)

        try:
            await self.lifecycle.file(message, reporter, notify_reporter)
        except ReportError as exc:
            logger.error("[REACTION LISTENER] Report on message %s by %s failed: %s", event.message_id, event.user_id, exc)
            await discord_utils.send_dm_to_user(reporter, messages.REPORT_FAILED)
            return False
        return True

    async def _resolve_user(self, event: ReactionTriggerEvent) -> Union[discord.User, None]:
        user = self.bot.get_user(event.user_id.to_int())
        if user is not None:
            return user
        try:
            return await self.bot.fetch_user(event.user_id.to_int())
        except discord.HTTPException as exc:
            logger.warning("[REACTION LISTENER] Could not fetch reacting user %s: %s", event.user_id, exc)
            return None

    async def _fetch_message(self, event: ReactionTriggerEvent) -> discord.Message | None:
        try:
            channel = self.bot.get_channel(event.channel_id.to_int())
            if channel is None:
                channel = await self.bot.fetch_channel(event.channel_id.to_int())
            return await channel.fetch_message(event.message_id.to_int())
        except discord.HTTPException as exc:
            logger.warning(
                "[REACTION LISTENER] Reported message %s in channel %s is unavailable: %s",
                event.message_id,
                event.channel_id,
                exc,
            )
            return None


def setup(
    bot: discord.Bot,
    lifecycle: ReportLifecycleManager,
    deduplicator: TriggerDeduplicator,
    settings: ReportSettings,
) -> None:
    """Register the ReactionListenerCog with the bot."""
    bot.add_cog(ReactionListenerCog(bot, lifecycle, deduplicator, settings))
