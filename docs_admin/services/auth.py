"""Password + emailed one-time-passcode login.

A login moves from awaiting the password, to a passcode having been issued,
to verified; any step may reject. Failure messages never reveal whether an
email address is registered.
"""

import logging
import secrets
from dataclasses import dataclass

from docs_admin.config import Settings
from docs_admin.errors import AuthenticationError, EmailSendError
from docs_admin.schemas.users import PublicUser, normalize_email, to_public
from docs_admin.services.email import Mailer
from docs_admin.services.otp import OtpStore, is_expired
from docs_admin.services.tokens import mint_session_token
from docs_admin.services.users import UserStore

LOGGER = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."
INVALID_CODE = "Invalid or expired verification code."
EXPIRED_CODE = "Verification code has expired. Please request a new one."
LOCKED_OUT = "Too many failed attempts. Please request a new verification code."
WRONG_CODE = "Invalid verification code."
SEND_FAILED = "Failed to send verification code. Please try again."


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser


class AuthService:
    def __init__(
        self, users: UserStore, otps: OtpStore, mailer: Mailer, settings: Settings
    ) -> None:
        self._users = users
        self._otps = otps
        self._mailer = mailer
        self._settings = settings

    def request_code(self, email: str, password: str) -> None:
        email = normalize_email(email)
        account = self._users.get_by_email(email)
        if account is None or not account.is_active:
            LOGGER.info("Login rejected for %s: unknown or inactive account", email)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not self._users.check_password(account, password):
            LOGGER.info("Login rejected for %s: password mismatch", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        record = self._otps.issue(email)
        try:
            self._mailer.send_otp(email, record.code, account.name)
        except EmailSendError as exc:
            LOGGER.error("Verification code dispatch failed for %s: %s", email, exc)
            raise EmailSendError(SEND_FAILED) from exc
        LOGGER.info("Verification code issued for %s", email)

    def verify_code(self, email: str, code: str) -> LoginResult:
        email = normalize_email(email)
        account = self._users.get_by_email(email)
        if account is None or not account.is_active:
            LOGGER.info("Verification rejected for %s: unknown or inactive account", email)
            raise AuthenticationError(INVALID_CODE)

        record = self._otps.current(email)
        if record is None:
            raise AuthenticationError(INVALID_CODE)
        if is_expired(record):
            raise AuthenticationError(EXPIRED_CODE)
        if record.attempts >= self._settings.otp_max_attempts:
            LOGGER.warning("Verification locked out for %s", email)
            raise AuthenticationError(LOCKED_OUT)
        if not secrets.compare_digest(record.code.encode(), code.strip().encode()):
            attempts = self._otps.record_failure(record)
            LOGGER.info("Wrong verification code for %s (attempt %d)", email, attempts)
            raise AuthenticationError(WRONG_CODE)

        token = mint_session_token(account, self._settings)
        self._otps.mark_used(record)
        account = self._users.record_login(account.id) or account
        LOGGER.info("Login completed for %s", email)
        return LoginResult(token=token, user=to_public(account))
