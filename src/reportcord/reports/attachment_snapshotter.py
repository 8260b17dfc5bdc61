"""Attachment downloading for report snapshots."""

from __future__ import annotations

import asyncio
from typing import List

import discord
import requests

from reportcord.datatypes.report_datatypes import DEFAULT_ATTACHMENT_NAME, ReportAttachment
from reportcord.util.logger import get_logger

logger = get_logger("attachment_snapshotter")


def download_attachment_bytes(url: str, timeout: float) -> bytes:
    """
    Download the raw bytes behind an attachment URL.

    This blocks the calling thread, so callers on the event loop should run it
    through ``asyncio.to_thread``.

    Raises:
        requests.RequestException: On connection errors, timeouts and non-2xx responses.
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


class AttachmentSnapshotter:
    """Copies every attachment of a message into memory.

    A failed download is logged and left out of the result; the remaining
    attachments keep their original order.
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self.timeout_seconds = timeout_seconds

    async def snapshot(self, message: discord.Message) -> List[ReportAttachment]:
        captured: List[ReportAttachment] = []

        for attachment in message.attachments:
            name = attachment.filename or DEFAULT_ATTACHMENT_NAME
            try:
                data = await asyncio.to_thread(
                    download_attachment_bytes, attachment.url, self.timeout_seconds
                )
            except requests.RequestException as exc:
                logger.warning("[SNAPSHOT] Failed to download attachment %s from message %s: %s", name, message.id, exc)
                continue

            captured.append(ReportAttachment(name=name, data=data))

        if message.attachments:
            logger.debug(
                "[SNAPSHOT] Captured %d/%d attachment(s) from message %s",
                len(captured),
                len(message.attachments),
                message.id,
            )
        return captured
