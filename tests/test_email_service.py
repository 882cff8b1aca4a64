import asyncio
import smtplib

import pytest

from restaurant_backend.domain.errors import NotificationError
from restaurant_backend.services.email_service import EmailService


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username, password))

    def send_message(self, msg):
        self.sent.append(msg)


class RejectingSMTP(FakeSMTP):
    def login(self, username, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture(autouse=True)
def _reset_instances():
    FakeSMTP.instances = []


def _service(port=587):
    return EmailService(
        smtp_host="smtp.example.com",
        smtp_port=port,
        smtp_username="mailer@example.com",
        smtp_password="secret",
        from_email="noreply@example.com",
        from_name="Bistro",
    )


def test_send_otp_email_uses_starttls(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)

    asyncio.run(_service().send_otp_email("eve@example.com", "012345", 5))

    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.calls == ["starttls", ("login", "mailer@example.com", "secret")]
    msg = server.sent[0]
    assert msg["To"] == "eve@example.com"
    assert msg["From"] == "Bistro <noreply@example.com>"
    text_part = msg.get_payload()[0].get_payload(decode=True).decode("utf-8")
    assert "012345" in text_part
    assert "5 minutes" in text_part


def test_port_465_uses_implicit_tls(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)

    asyncio.run(_service(port=465).send_otp_email("eve@example.com", "999999", 5))

    assert FakeSMTP.instances[0].calls == [("login", "mailer@example.com", "secret")]


def test_transport_failure_raises_notification_error(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", RejectingSMTP)

    with pytest.raises(NotificationError):
        asyncio.run(_service().send_otp_email("eve@example.com", "012345", 5))
