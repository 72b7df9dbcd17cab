import smtplib

import pytest

from accounts.services import mail
from accounts.services.mail import MailConfig, VerificationMailer
from accounts.utils.config import Settings


class FakeSMTP:
    instances: list["FakeSMTP"] = []
    refuse: dict = {}
    fail_with: Exception | None = None

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append(message)
        return FakeSMTP.refuse


@pytest.fixture
def smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.refuse = {}
    FakeSMTP.fail_with = None
    monkeypatch.setattr(mail.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def config():
    return MailConfig(
        host="smtp.test",
        port=2525,
        sender="accounts@example.com",
        base_url="http://localhost:3000/",
        user="mailer",
        password="mailer-pass",
    )


def test_mail_config_from_settings():
    settings = Settings(smtp_host="mx.example.com", smtp_port=25, mail_from="me@example.com",
                        verification_base_url="https://app.example.com", smtp_starttls=False)
    config = MailConfig.from_settings(settings)
    assert config.host == "mx.example.com"
    assert config.port == 25
    assert config.sender == "me@example.com"
    assert config.base_url == "https://app.example.com"
    assert config.starttls is False


def test_send_verification_email(smtp, config):
    refused = VerificationMailer(config).send_verification_email("to@example.com", "tok123")
    assert refused == {}

    (server,) = smtp.instances
    assert (server.host, server.port) == ("smtp.test", 2525)
    assert server.calls[:2] == ["starttls", ("login", "mailer", "mailer-pass")]

    (message,) = server.sent
    assert message["To"] == "to@example.com"
    assert message["From"] == "accounts@example.com"
    assert message["Subject"] == "Email Verification"
    assert message.get_content().strip() == (
        "Click the following link to verify your email: http://localhost:3000/auth/verify/tok123"
    )


def test_send_verification_email_returns_refusals(smtp, config):
    smtp.refuse = {"to@example.com": (550, b"no such user")}
    refused = VerificationMailer(config).send_verification_email("to@example.com", "tok")
    assert refused == {"to@example.com": (550, b"no such user")}


def test_send_verification_email_propagates_transport_errors(smtp, config):
    smtp.fail_with = smtplib.SMTPServerDisconnected("gone")
    with pytest.raises(smtplib.SMTPServerDisconnected):
        VerificationMailer(config).send_verification_email("to@example.com", "tok")
    assert len(smtp.instances) == 1


def test_send_without_credentials_skips_login(smtp):
    config = MailConfig(host="h", port=1, sender="s@example.com", base_url="http://x", starttls=False)
    VerificationMailer(config).send_verification_email("to@example.com", "tok")
    (server,) = smtp.instances
    assert server.calls == ["quit"]
