"""
In-memory store of pending reports.

Reports live only as long as the process. Every method is synchronous, so on
the bot's single event loop each call runs without interleaving and per-key
check-then-act sequences inside a method are atomic.
"""

from __future__ import annotations

import secrets
import string
from typing import Callable, Dict

from reportcord.datatypes.report_datatypes import ReportRecord
from reportcord.reports.errors import ReportIdExhaustedError
from reportcord.util.logger import get_logger

logger = get_logger("report_store")

REPORT_ID_ALPHABET = string.ascii_lowercase + string.digits
REPORT_ID_LENGTH = 8
MAX_ID_ATTEMPTS = 16


def generate_report_id() -> str:
    """Return a random 8-character base36 token."""
    return "".join(secrets.choice(REPORT_ID_ALPHABET) for _ in range(REPORT_ID_LENGTH))


class ReportStore:
    """Maps report IDs to pending :class:`ReportRecord` objects.

    IDs are random; a generated ID that is already pending is rejected and a new
    one drawn, up to ``max_attempts`` times.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = generate_report_id,
        max_attempts: int = MAX_ID_ATTEMPTS,
    ) -> None:
        self._reports: Dict[str, ReportRecord] = {}
        self._id_factory = id_factory
        self._max_attempts = max_attempts

    def create(self, record: ReportRecord) -> str:
        """Assign a fresh ID to ``record``, insert it and return the ID.

        Raises:
            ReportIdExhaustedError: If every attempt produced an ID already in use.
        """
        for _ in range(self._max_attempts):
            report_id = self._id_factory()
            if report_id in self._reports:
                logger.warning("[REPORT STORE] Report ID collision on %s, retrying", report_id)
                continue
            record.report_id = report_id
            self._reports[report_id] = record
            logger.debug("[REPORT STORE] Stored report %s (%d pending)", report_id, len(self._reports))
            return report_id

        raise ReportIdExhaustedError(
            f"No free report ID after {self._max_attempts} attempts ({len(self._reports)} pending)"
        )

    def get(self, report_id: str) -> ReportRecord | None:
        """Return the pending report, or None when it is unknown or already resolved."""
        return self._reports.get(report_id)

    def delete(self, report_id: str) -> ReportRecord | None:
        """Remove a report and return it, or None if it was not pending."""
        record = self._reports.pop(report_id, None)
        if record is not None:
            logger.debug("[REPORT STORE] Removed report %s (%d pending)", report_id, len(self._reports))
        return record

    def reinstate(self, record: ReportRecord) -> None:
        """Put back a report that was removed but could not be resolved."""
        if record.report_id in self._reports:
            logger.warning("[REPORT STORE] Report %s already pending; not reinstating", record.report_id)
            return
        self._reports[record.report_id] = record
        logger.info("[REPORT STORE] Reinstated report %s", record.report_id)

    def __contains__(self, report_id: object) -> bool:
        return report_id in self._reports

    def __len__(self) -> int:
        return len(self._reports)
