"""User-facing texts for the report workflow."""

REPORT_COMMAND_NAME = "Report to moderators"

REPORT_ACKNOWLEDGEMENT = "Thank you. Your report has been sent to the moderation team."
REPORT_FAILED = "Sorry, your report could not be delivered to the moderators. Please try again later."

REPORT_UNKNOWN = "This report is no longer available (the bot may have restarted)."
REPORT_UNAUTHORIZED = "Only moderators can make decisions on reports."
GENERIC_FAILURE = "Something went wrong while processing this action."

RESTORED_HEADER = "**Message restored after moderation review. Original author:** <@{author_id}>"
ATTACHMENTS_FOLLOW_UP = "Attachments for report **{report_id}**:"

REMOVAL_NOTICE = (
    "Hello. Your post in **{guild_name}** was removed by a moderator because it did not "
    "follow the server rules.\n\nIf you have questions, please contact the moderation team."
)
