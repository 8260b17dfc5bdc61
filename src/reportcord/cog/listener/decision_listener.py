"""Decision listener Cog for Reportcord.

Routes clicks on report decision buttons to the DecisionHandler and renders the
result back into the moderation channel.
"""

import discord
from discord.ext import commands

from reportcord.datatypes.report_datatypes import DecisionControlID, DecisionOutcome
from reportcord.reports.decision_handler import DecisionHandler
from reportcord.ui import messages
from reportcord.ui.report_embed import build_resolved_report_embed
from reportcord.ui.report_ui import build_resolved_view
from reportcord.util.logger import get_logger

logger = get_logger("decision_listener")

REJECTION_MESSAGES: dict[DecisionOutcome, str] = {
    DecisionOutcome.UNKNOWN_REPORT: messages.REPORT_UNKNOWN,
    DecisionOutcome.UNAUTHORIZED: messages.REPORT_UNAUTHORIZED,
}


class DecisionListenerCog(commands.Cog):
    """Handles component interactions whose custom ID is a report decision control."""

    def __init__(self, bot: discord.Bot, decision_handler: DecisionHandler) -> None:
        self.bot = bot
        self.decision_handler = decision_handler
        logger.info("[DECISION LISTENER] Decision listener cog loaded")

    @commands.Cog.listener(name="on_interaction")
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type != discord.InteractionType.component:
            return

        control = DecisionControlID.parse((interaction.data or {}).get("custom_id"))
        if control is None:
            return

        try:
            await self.handle_decision(interaction, control)
        except Exception:
            logger.exception("[DECISION LISTENER] Error while handling %s on report %s", control.action, control.report_id)
            await self._reply_generic_failure(interaction)

    async def handle_decision(self, interaction: discord.Interaction, control: DecisionControlID) -> DecisionOutcome:
        # Restoring attachments or reaching the author can outlast the 3 second response window
        await interaction.response.defer()

        async def render_surface(outcome: DecisionOutcome, author_notified: bool) -> None:
            original = interaction.message.embeds[0] if interaction.message and interaction.message.embeds else None
            embed = build_resolved_report_embed(original, outcome, interaction.user, author_notified)
            view = build_resolved_view(control.report_id)
            try:
                await interaction.edit_original_response(embed=embed, view=view)
            finally:
                view.stop()

        outcome = await self.decision_handler.decide(
            control.report_id,
            control.action,
            interaction.user,
            interaction.guild,
            render_surface,
        )

        rejection = REJECTION_MESSAGES.get(outcome)
        if rejection is not None:
            await interaction.followup.send(rejection, ephemeral=True)
        return outcome

    async def _reply_generic_failure(self, interaction: discord.Interaction) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(messages.GENERIC_FAILURE, ephemeral=True)
            else:
                await interaction.response.send_message(messages.GENERIC_FAILURE, ephemeral=True)
        except discord.HTTPException as exc:
            logger.warning("[DECISION LISTENER] Could not send failure notice: %s", exc)


def setup(bot: discord.Bot, decision_handler: DecisionHandler) -> None:
    """Register the DecisionListenerCog with the bot."""
    bot.add_cog(DecisionListenerCog(bot, decision_handler))
