import smtplib

import pytest

from backinstock.config import Settings
from backinstock.services.email import LogEmailSender, SmtpEmailSender, get_email_sender


class FakeSMTP:
    instances: list["FakeSMTP"] = []
    fail_login = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def sendmail(self, from_addr, to_addrs, msg):
        self.sent.append((from_addr, to_addrs, msg))


@pytest.fixture()
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr("backinstock.services.email.smtp.smtplib.SMTP", FakeSMTP)
    return FakeSMTP


class TestSmtpEmailSender:
    def test_sends_multipart_message(self, fake_smtp):
        sender = SmtpEmailSender("smtp.test", 587, "shop@x.com", "secret", from_address="Acme <shop@x.com>")

        result = sender.send("a@x.com", "Widget back!", "<p>hi</p>", "hi")

        assert result.ok is True
        assert result.message_id
        smtp = fake_smtp.instances[0]
        assert (smtp.host, smtp.port) == ("smtp.test", 587)
        from_addr, to_addrs, raw = smtp.sent[0]
        assert to_addrs == ["a@x.com"]
        assert "Subject: Widget back!" in raw
        assert "From: Acme <shop@x.com>" in raw
        assert "multipart/alternative" in raw

    def test_missing_credentials(self, fake_smtp):
        result = SmtpEmailSender("smtp.test", 587, "", "").send("a@x.com", "s", "<p>b</p>", "b")
        assert result.ok is False
        assert "SMTP_USER" in result.error
        assert fake_smtp.instances == []

    def test_smtp_error_is_failure(self, fake_smtp):
        fake_smtp.fail_login = True
        result = SmtpEmailSender("smtp.test", 587, "u", "p").send("a@x.com", "s", "<p>b</p>", "b")
        assert result.ok is False
        assert result.error.startswith("SMTP error")


class TestGetEmailSender:
    def test_log_backend(self):
        sender = get_email_sender(Settings(email_backend="LOG"))
        assert isinstance(sender, LogEmailSender)
        assert sender.send("a@x.com", "s", "<p>b</p>", "b").message_id.startswith("log-")

    def test_smtp_backend(self):
        assert isinstance(get_email_sender(Settings(email_backend="smtp")), SmtpEmailSender)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_email_sender(Settings(email_backend="carrier-pigeon"))
