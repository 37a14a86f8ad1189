from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Optional, Protocol

from docs_admin.config import Settings
from docs_admin.errors import EmailSendError

LOGGER = logging.getLogger(__name__)


class Mailer(Protocol):
    def send_otp(self, to_email: str, code: str, name: Optional[str] = None) -> None: ...

    def send_welcome(self, to_email: str, name: str, role: str, password: str) -> None: ...


class SmtpMailer:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def enabled(self) -> bool:
        s = self._settings
        return bool(s.smtp_host and s.smtp_port > 0 and s.smtp_from)

    def send_otp(self, to_email: str, code: str, name: Optional[str] = None) -> None:
        subject = f"{self._settings.app_name} - Login Verification Code"
        text = _build_otp_body(code, name, self._settings.otp_expiry_minutes)
        html = _build_otp_html(code, name, self._settings.otp_expiry_minutes)
        self._send(to_email, subject, text, html)
        LOGGER.info("Verification code sent to %s", to_email)

    def send_welcome(self, to_email: str, name: str, role: str, password: str) -> None:
        subject = f"Welcome to {self._settings.app_name}"
        text = _build_welcome_body(self._settings.app_name, to_email, name, role, password)
        html = _build_welcome_html(self._settings.app_name, to_email, name, role, password)
        self._send(to_email, subject, text, html)
        LOGGER.info("Welcome email sent to %s", to_email)

    def _send(self, to_email: str, subject: str, text: str, html: str) -> None:
        if not self.enabled:
            raise EmailSendError("Mail transport is not configured")

        s = self._settings
        message = EmailMessage()
        message["From"] = s.smtp_from
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(text)
        message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds) as server:
                server.starttls()
                if s.smtp_user:
                    server.login(s.smtp_user, s.smtp_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            LOGGER.error("Failed sending email to %s: %s", to_email, exc)
            raise EmailSendError("Failed to send email") from exc


def _build_otp_body(code: str, name: Optional[str], expiry_minutes: int) -> str:
    greeting = f"Hello {name}," if name else "Hello,"
    return (
        f"{greeting}\n\n"
        f"Your login verification code is {code}.\n\n"
        f"It expires in {expiry_minutes} minute(s).\n\n"
        "If you did not try to sign in, you can ignore this email."
    )


def _build_otp_html(code: str, name: Optional[str], expiry_minutes: int) -> str:
    greeting = f"Hello {escape(name)}," if name else "Hello,"
    return f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333;">
        <p>{greeting}</p>
        <p>Use the following code to complete your sign-in:</p>
        <p style="font-size: 32px; font-weight: bold; letter-spacing: 5px;">{code}</p>
        <p><strong>This code will expire in {expiry_minutes} minutes.</strong></p>
        <p>If you did not try to sign in, you can ignore this email.</p>
      </body>
    </html>
    """


def _build_welcome_body(app_name: str, email: str, name: str, role: str, password: str) -> str:
    return (
        f"Hello {name},\n\n"
        f"An account has been created for you on {app_name} with the role {role}.\n\n"
        f"Email: {email}\n"
        f"Password: {password}\n\n"
        "Sign in with these credentials; a verification code will be emailed to you."
    )


def _build_welcome_html(app_name: str, email: str, name: str, role: str, password: str) -> str:
    app_name, email, name, role, password = (
        escape(value) for value in (app_name, email, name, role, password)
    )
    return f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333;">
        <p>Hello {name},</p>
        <p>An account has been created for you on {app_name} with the role <strong>{role}</strong>.</p>
        <p>Email: <strong>{email}</strong><br>Password: <strong>{password}</strong></p>
        <p>Sign in with these credentials; a verification code will be emailed to you.</p>
      </body>
    </html>
    """
