"""Per-message guard against duplicate reaction reports."""

from __future__ import annotations

from typing import Set

from reportcord.datatypes.discord_datatypes import MessageID
from reportcord.util.logger import get_logger

logger = get_logger("trigger_deduplicator")


class TriggerDeduplicator:
    """Remembers which messages already produced a report through a reaction.

    Entries are never removed while the process runs. :meth:`claim` checks and
    records in one synchronous step, so two reaction events for the same message
    cannot both pass it.
    """

    def __init__(self) -> None:
        self._reported: Set[MessageID] = set()

    def claim(self, message_id: MessageID) -> bool:
        """Mark the message as reported. Returns False if it already was."""
        if message_id in self._reported:
            logger.debug("[DEDUP] Message %s already reported via reaction", message_id)
            return False
        self._reported.add(message_id)
        return True

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._reported

    def __len__(self) -> int:
        return len(self._reported)
