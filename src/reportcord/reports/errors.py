"""Exceptions raised by the report workflow."""


class ReportError(Exception):
    """Base class for report workflow failures."""


class ReportPublishError(ReportError):
    """The report summary could not be delivered to the moderation channel.

    Without the summary moderators cannot reach the report, so this is the one
    failure the filing workflow surfaces to its caller.
    """

    def __init__(self, report_id: str, reason: str) -> None:
        super().__init__(f"Could not publish report {report_id}: {reason}")
        self.report_id = report_id
        self.reason = reason


class ReportIdExhaustedError(ReportError):
    """No free report ID was found within the retry budget."""
