"""Event listener Cog for Reportcord.

This cog has exactly ONE responsibility: handle bot lifecycle events
(on_ready, on_guild_join).
"""

import discord
from discord.ext import commands

from reportcord.configuration.report_settings import ReportSettings
from reportcord.util.logger import get_logger

logger = get_logger("events_listener")


class EventsListenerCog(commands.Cog):
    """Handles Discord bot lifecycle events."""

    def __init__(self, bot: discord.Bot, settings: ReportSettings) -> None:
        self.bot = bot
        self.settings = settings
        logger.info("[EVENTS LISTENER] Events listener cog loaded")

    # ------------------------------------------------------------------
    # Lifecycle events
    # ------------------------------------------------------------------

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self) -> None:
        """Set bot presence and log the report workflow configuration."""
        if not self.bot.user:
            logger.warning(
                "[EVENTS LISTENER] Bot partially connected; user info not yet available."
            )
            return

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="for reported messages",
            ),
        )
        logger.info("Bot connected as %s (ID: %s)", self.bot.user, self.bot.user.id)
        self._log_configuration()

    @commands.Cog.listener(name="on_guild_join")
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("[EVENTS LISTENER] Joined guild '%s' (ID: %s)", guild.name, guild.id)

    def _log_configuration(self) -> None:
        if self.settings.moderation_channel_id is None:
            logger.error("[EVENTS LISTENER] No moderation channel configured; reports cannot be published.")
        if self.settings.moderator_role_id is None:
            logger.error("[EVENTS LISTENER] No moderator role configured; nobody can decide on reports.")

        if self.settings.trigger_emoji_id is not None:
            logger.info("[EVENTS LISTENER] Report reaction: emoji ID %s", self.settings.trigger_emoji_id)
        else:
            logger.info("[EVENTS LISTENER] Report reaction: emoji named '%s'", self.settings.trigger_emoji_name)


def setup(bot: discord.Bot, settings: ReportSettings) -> None:
    """Register the EventsListenerCog with the bot."""
    bot.add_cog(EventsListenerCog(bot, settings))
