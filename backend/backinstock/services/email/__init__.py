"""Email transports. get_email_sender picks one from Settings.email_backend."""
from backinstock.config import Settings
from backinstock.services.email.base import EmailSender, SendResult
from backinstock.services.email.log_sender import LogEmailSender
from backinstock.services.email.smtp import SmtpEmailSender


def get_email_sender(settings: Settings) -> EmailSender:
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_user,
            settings.smtp_password,
            from_address=settings.notify_from,
        )
    if settings.email_backend == "log":
        return LogEmailSender()
    raise ValueError(f"Unknown email backend: {settings.email_backend}. Use 'log' or 'smtp'.")


__all__ = ["EmailSender", "LogEmailSender", "SendResult", "SmtpEmailSender", "get_email_sender"]
