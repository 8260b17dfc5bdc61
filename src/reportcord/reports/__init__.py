"""
Report lifecycle for Reportcord.

This package owns the state and rules of the report workflow:

- **report_store.py**: In-memory store of pending reports keyed by short random
  IDs, with reject-and-retry collision handling.

- **trigger_deduplicator.py**: Append-only record of messages already reported via
  reactions, so repeated reactions on one message file a single report.

- **attachment_snapshotter.py**: Downloads message attachments, dropping the ones
  that fail instead of failing the whole capture.

- **report_lifecycle.py**: Files a report: acknowledges the reporter, snapshots and
  stores the message, publishes it to moderators and then removes the original
  message when permitted.

- **decision_handler.py**: Applies a moderator's approve/delete decision once,
  after checking the moderator role.
"""
