"""
Reportcord - Community Report Workflow for Discord

Reportcord lets members flag a message for moderator review, either through the
"Report to moderators" message command or by reacting with the server's report
emoji. The flagged message is captured and pulled from the channel, and a
decision request is posted to the moderation channel.

Core Components:

- **Report Lifecycle**: Captures content and attachments, stores the report,
  publishes it to moderators and removes the original message when permitted
- **Decision Handling**: Role-gated approve/delete buttons that restore the
  message or notify the author, resolving each report exactly once
- **Trigger Adapters**: Message command and reaction listeners with per-message
  reaction deduplication

Usage:
    from reportcord.main import main
    main()  # Starts the bot
"""
