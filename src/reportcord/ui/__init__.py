"""
Moderator-facing presentation for Reportcord.

- **report_embed.py**: Embed builders for new report summaries and resolved reports.
- **report_ui.py**: Decision button view carrying encoded approve/delete control IDs.
"""
