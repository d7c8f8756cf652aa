"""
Send back-in-stock emails via SMTP (Gmail or any provider with STARTTLS).
Set SMTP_USER, SMTP_PASSWORD (and optionally SMTP_HOST, SMTP_PORT, NOTIFY_FROM) in .env.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from backinstock.services.email.base import SendResult

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        *,
        from_address: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._user = (user or "").strip()
        self._password = (password or "").strip()
        self._from = (from_address or "").strip()
        self._timeout = timeout

    def _from_address(self) -> str:
        if self._from:
            return self._from
        if self._user:
            return f"Back in Stock <{self._user}>"
        return "Back in Stock <noreply@localhost>"

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> SendResult:
        to = (to or "").strip()
        if not to:
            return SendResult.failure("recipient address is empty")
        if not self._user or not self._password:
            return SendResult.failure("SMTP_USER or SMTP_PASSWORD not set")
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._from_address()
        msg["To"] = to
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                server.starttls()
                server.login(self._user, self._password)
                server.sendmail(self._user, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP send to %s failed: %s", to, e)
            return SendResult.failure(f"SMTP error: {e}")
        logger.info("Email sent to %s: %s", to, subject)
        return SendResult.success(message_id=msg["Message-ID"])
