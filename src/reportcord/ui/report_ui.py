"""
Decision buttons attached to report summaries.

The buttons carry their action and report ID in the custom ID, so clicks are
routed by the decision listener cog rather than by view callbacks. That keeps
clicks on summaries from before a restart answerable: they parse fine and then
hit the unknown-report path.
"""

from __future__ import annotations

import discord

from reportcord.datatypes.report_datatypes import DecisionControlID, ReportAction

BUTTON_LABELS: dict[ReportAction, str] = {
    ReportAction.APPROVE: "Restore message",
    ReportAction.DELETE: "Delete and notify",
}

BUTTON_STYLES: dict[ReportAction, discord.ButtonStyle] = {
    ReportAction.APPROVE: discord.ButtonStyle.success,
    ReportAction.DELETE: discord.ButtonStyle.danger,
}


class ReportDecisionView(discord.ui.View):
    """Approve/delete buttons for one report.

    Senders call :meth:`stop` once the message is out. Clicks are handled by the
    decision listener, so a view left running would only sit in the client's
    view store for the lifetime of the process.

    Args:
        report_id: Report the buttons decide on
        disabled: Render the buttons greyed out, used once the report is resolved
    """

    def __init__(self, report_id: str, disabled: bool = False):
        super().__init__(timeout=None)
        self.report_id = report_id

        for action in (ReportAction.APPROVE, ReportAction.DELETE):
            self.add_item(
                discord.ui.Button(
                    label=BUTTON_LABELS[action],
                    style=BUTTON_STYLES[action],
                    custom_id=DecisionControlID(action=action, report_id=report_id).encode(),
                    disabled=disabled,
                )
            )


def build_resolved_view(report_id: str) -> ReportDecisionView:
    """Return the button row with every control disabled."""
    return ReportDecisionView(report_id, disabled=True)
