import logging
import secrets
from datetime import datetime, timedelta
from typing import Iterable, Optional

from pydantic import ValidationError as SchemaError

from docs_admin.schemas.otp import OTP_LENGTH, OneTimePasscode
from docs_admin.storage.base import (
    Collection,
    Record,
    generate_id,
    parse_timestamp,
    to_timestamp,
    utcnow,
)

LOGGER = logging.getLogger(__name__)


def generate_code() -> str:
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


def is_expired(record: OneTimePasscode, now: Optional[datetime] = None) -> bool:
    return (now or utcnow()) > parse_timestamp(record.expires_at)


def _parse(records: Iterable[Record]) -> list[OneTimePasscode]:
    parsed = []
    for record in records:
        try:
            parsed.append(OneTimePasscode.model_validate(record))
        except SchemaError:
            LOGGER.warning("Skipping malformed passcode record %s", record.get("id"))
    return parsed


class OtpStore:
    def __init__(self, collection: Collection, expiry_minutes: int) -> None:
        self._collection = collection
        self._expiry_minutes = expiry_minutes

    def issue(
        self, email: str, code: Optional[str] = None, expiry_minutes: Optional[int] = None
    ) -> OneTimePasscode:
        """Store a fresh passcode for ``email``, dropping every older one."""
        now = utcnow()
        minutes = expiry_minutes if expiry_minutes is not None else self._expiry_minutes
        records = self._collection.snapshot()
        kept = [record for record in records if record.get("email") != email]
        if len(kept) != len(records):
            LOGGER.debug(
                "Pruning %d superseded passcode(s) for %s", len(records) - len(kept), email
            )
        record = {
            "id": generate_id(),
            "email": email,
            "code": code or generate_code(),
            "expires_at": to_timestamp(now + timedelta(minutes=minutes)),
            "attempts": 0,
            "used": False,
            "created_at": to_timestamp(now),
        }
        self._collection.replace_all([*kept, record])
        return OneTimePasscode.model_validate(record)

    def current(self, email: str) -> Optional[OneTimePasscode]:
        """Most recent unused passcode for ``email``, expired or not."""
        candidates = [
            record
            for record in _parse(self._collection.list_all())
            if record.email == email and not record.used
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda record: parse_timestamp(record.created_at))

    def record_failure(self, record: OneTimePasscode) -> int:
        attempts = record.attempts + 1
        self._collection.update(record.id, {"attempts": attempts})
        return attempts

    def mark_used(self, record: OneTimePasscode) -> bool:
        return self._collection.update(record.id, {"used": True}) is not None

    def list_all(self) -> list[OneTimePasscode]:
        return _parse(self._collection.list_all())
