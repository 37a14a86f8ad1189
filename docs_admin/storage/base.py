"""Collection-of-records storage shared by every backend.

A backend only knows how to read and rewrite one whole collection. The
record-level operations are implemented once here on top of those two
primitives, so every backend behaves the same from the caller's side.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from docs_admin.errors import StorageError

LOGGER = logging.getLogger(__name__)

USERS = "users"
ONE_TIME_PASSCODES = "one-time-passcodes"

_ID_ALPHABET = string.ascii_lowercase + string.digits

Record = dict[str, Any]


def generate_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{int(time.time() * 1000)}-{suffix}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(raw_value: str) -> datetime:
    parsed = datetime.fromisoformat(raw_value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Collection(ABC):
    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def _read(self) -> list[Record]:
        """Return the stored collection; raise on any read failure."""

    @abstractmethod
    def _write(self, records: list[Record]) -> None:
        """Replace the stored collection as a single unit."""

    def snapshot(self) -> list[Record]:
        """Current records for a read-modify-write.

        Raises ``StorageError`` when the collection cannot be read, so a
        write never rebuilds a collection from an empty fallback.
        """
        try:
            records = self._read()
        except Exception as exc:
            LOGGER.exception("Failed to read collection %s", self.name)
            raise StorageError(f"Failed to read {self.name}") from exc
        if not isinstance(records, list):
            LOGGER.error("Collection %s is not a list", self.name)
            raise StorageError(f"Failed to read {self.name}")
        return [record for record in records if isinstance(record, dict)]

    def list_all(self) -> list[Record]:
        try:
            return self.snapshot()
        except StorageError:
            return []

    def get_by_field(self, field: str, value: Any) -> Record | None:
        for record in self.list_all():
            if record.get(field) == value:
                return record
        return None

    def insert(self, values: Record) -> Record:
        records = self.snapshot()
        record = {
            **values,
            "id": generate_id(),
            "created_at": to_timestamp(utcnow()),
        }
        records.append(record)
        self._write(records)
        return record

    def update(self, record_id: str, changes: Record) -> Record | None:
        records = self.snapshot()
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                updated = {**record, **changes, "id": record_id}
                records[index] = updated
                self._write(records)
                return updated
        return None

    def delete(self, record_id: str) -> bool:
        records = self.snapshot()
        remaining = [record for record in records if record.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        return True

    def replace_all(self, records: list[Record]) -> None:
        self._write(list(records))


class StorageBackend(ABC):
    storage_type: str = "Storage"

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}

    def collection(self, name: str) -> Collection:
        if name not in self._collections:
            self._collections[name] = self._open(name)
        return self._collections[name]

    @abstractmethod
    def _open(self, name: str) -> Collection:
        raise NotImplementedError
