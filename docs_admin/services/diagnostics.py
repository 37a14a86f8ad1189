from datetime import datetime, timedelta
from typing import Any

from docs_admin.schemas.otp import OneTimePasscode
from docs_admin.schemas.users import ROLES, Account, to_summary
from docs_admin.services.otp import OtpStore, is_expired
from docs_admin.services.users import UserStore
from docs_admin.storage.base import parse_timestamp, to_timestamp, utcnow

RECENT_WINDOW = timedelta(hours=24)


def passcode_status(record: OneTimePasscode, now: datetime) -> str:
    if record.used:
        return "used"
    return "expired" if is_expired(record, now) else "active"


def _redact_passcode(record: OneTimePasscode, now: datetime) -> dict[str, Any]:
    return {
        "id": record.id,
        "email": record.email,
        "status": passcode_status(record, now),
        "attempts": record.attempts,
        "code_length": len(record.code),
        "expires_at": record.expires_at,
        "created_at": record.created_at,
    }


def _stats(accounts: list[Account], passcodes: list[OneTimePasscode], now: datetime) -> dict:
    statuses = [passcode_status(record, now) for record in passcodes]
    return {
        "total_users": len(accounts),
        "active_users": sum(1 for account in accounts if account.is_active),
        "inactive_users": sum(1 for account in accounts if not account.is_active),
        "users_by_role": {
            role: sum(1 for account in accounts if account.role == role) for role in ROLES
        },
        "total_otps": len(passcodes),
        "active_otps": statuses.count("active"),
        "used_otps": statuses.count("used"),
        "expired_otps": statuses.count("expired"),
        "recent_otps": sum(
            1 for record in passcodes if parse_timestamp(record.created_at) > now - RECENT_WINDOW
        ),
    }


class Diagnostics:
    def __init__(self, users: UserStore, otps: OtpStore, storage_type: str) -> None:
        self._users = users
        self._otps = otps
        self.storage_type = storage_type

    def database_view(self) -> dict[str, Any]:
        """Users plus passcodes from the last day, newest first."""
        now = utcnow()
        accounts = self._users.list_users()
        passcodes = self._otps.list_all()
        recent = sorted(
            (
                record
                for record in passcodes
                if parse_timestamp(record.created_at) > now - RECENT_WINDOW
            ),
            key=lambda record: parse_timestamp(record.created_at),
            reverse=True,
        )
        return {
            "users": [to_summary(account).model_dump() for account in accounts],
            "otps": [_redact_passcode(record, now) for record in recent],
            "stats": _stats(accounts, passcodes, now),
            "storage_type": self.storage_type,
            "last_updated": to_timestamp(now),
        }

    def database_dump(self) -> dict[str, Any]:
        now = utcnow()
        accounts = self._users.list_users()
        passcodes = self._otps.list_all()
        return {
            "timestamp": to_timestamp(now),
            "storage_type": self.storage_type,
            "users": [to_summary(account).model_dump() for account in accounts],
            "otps": [_redact_passcode(record, now) for record in passcodes],
            "stats": _stats(accounts, passcodes, now),
        }

    def public_stats(self) -> dict[str, Any]:
        now = utcnow()
        stats = _stats(self._users.list_users(), self._otps.list_all(), now)
        return {"timestamp": to_timestamp(now), "storage_type": self.storage_type, **stats}
