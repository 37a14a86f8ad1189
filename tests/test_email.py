import smtplib
from dataclasses import replace

import pytest

from docs_admin.errors import EmailSendError
from docs_admin.services import email as email_service
from docs_admin.services.email import SmtpMailer


class FakeSMTP:
    sent: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = user

    def send_message(self, message):
        FakeSMTP.sent.append(message)


class BrokenSMTP(FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPServerDisconnected("gone")


@pytest.fixture
def smtp_settings(settings):
    return replace(
        settings,
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="pw",
        smtp_from="docs@x.com",
    )


def test_unconfigured_mailer_raises(settings):
    with pytest.raises(EmailSendError):
        SmtpMailer(settings).send_otp("a@x.com", "123456")


def test_otp_mail_contains_code(monkeypatch, smtp_settings):
    FakeSMTP.sent = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)

    SmtpMailer(smtp_settings).send_otp("a@x.com", "654321", "<Ann>")

    (message,) = FakeSMTP.sent
    assert message["To"] == "a@x.com"
    assert message["From"] == "docs@x.com"
    html = message.get_body(preferencelist=("html",)).get_content()
    assert "654321" in html
    assert "&lt;Ann&gt;" in html


def test_welcome_mail_contains_credentials(monkeypatch, smtp_settings):
    FakeSMTP.sent = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)

    SmtpMailer(smtp_settings).send_welcome("n@x.com", "New", "member", "s3cret-pass")

    text = FakeSMTP.sent[0].get_body(preferencelist=("plain",)).get_content()
    assert "s3cret-pass" in text
    assert "member" in text


def test_transport_failure_raises(monkeypatch, smtp_settings):
    monkeypatch.setattr(email_service.smtplib, "SMTP", BrokenSMTP)

    with pytest.raises(EmailSendError):
        SmtpMailer(smtp_settings).send_otp("a@x.com", "123456")


def test_welcome_html_escapes_supplied_values(monkeypatch, smtp_settings):
    FakeSMTP.sent = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)

    SmtpMailer(smtp_settings).send_welcome("n@x.com", "New", "member", "a<b&c>d")

    html = FakeSMTP.sent[0].get_body(preferencelist=("html",)).get_content()
    assert "a&lt;b&amp;c&gt;d" in html
    assert "a<b&c>d" not in html
