"""EmailSender that only logs the rendered message. Default until a real transport is configured."""
import logging
from uuid import uuid4

from backinstock.services.email.base import SendResult

logger = logging.getLogger(__name__)


class LogEmailSender:
    def send(self, to: str, subject: str, html_body: str, text_body: str) -> SendResult:
        logger.info("Back-in-stock email would be sent to=%s subject=%r (%d chars)", to, subject, len(text_body))
        return SendResult.success(message_id=f"log-{uuid4().hex[:12]}")
