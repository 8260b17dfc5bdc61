"""
Report command cog: the "Report to moderators" message context-menu command.

Every invocation files exactly one report; the reporter is answered with
ephemeral messages so nothing shows up in the channel.
"""

import discord
from discord.ext import commands

from reportcord.reports.errors import ReportError
from reportcord.reports.report_lifecycle import ReportLifecycleManager
from reportcord.ui import messages
from reportcord.util.logger import get_logger

logger = get_logger("report_commands")


class ReportCommandsCog(commands.Cog):
    """Message command that lets members flag a message for moderators."""

    def __init__(self, bot: discord.Bot, lifecycle: ReportLifecycleManager) -> None:
        self.bot = bot
        self.lifecycle = lifecycle
        logger.info("[REPORT CMDS] Report commands cog loaded")

    @discord.message_command(name=messages.REPORT_COMMAND_NAME)
    async def report_message(self, ctx: discord.ApplicationContext, message: discord.Message):
        """File a report for the targeted message."""
        if ctx.guild is None or message.guild is None:
            await ctx.respond("Reports can only be filed inside a server.", ephemeral=True)
            return

        async def notify_reporter(text: str) -> None:
            await ctx.respond(text, ephemeral=True)

        try:
            await self.lifecycle.file(message, ctx.author, notify_reporter)
        except ReportError as exc:
            logger.error("[REPORT CMDS] Report on message %s by %s failed: %s", message.id, ctx.author.id, exc)
            await self._respond_failure(ctx, messages.REPORT_FAILED)
        except Exception:
            logger.exception("[REPORT CMDS] Unexpected error while reporting message %s", message.id)
            await self._respond_failure(ctx, messages.GENERIC_FAILURE)

    async def _respond_failure(self, ctx: discord.ApplicationContext, text: str) -> None:
        try:
            await ctx.respond(text, ephemeral=True)
        except discord.HTTPException as exc:
            logger.warning("[REPORT CMDS] Could not tell %s about the failure: %s", ctx.author.id, exc)


def setup(bot: discord.Bot, lifecycle: ReportLifecycleManager) -> None:
    """Register the ReportCommandsCog with the bot."""
    bot.add_cog(ReportCommandsCog(bot, lifecycle))
