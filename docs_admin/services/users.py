import logging
from typing import Iterable, Optional

from pydantic import ValidationError as SchemaError

from docs_admin.errors import ConflictError
from docs_admin.schemas.users import Account, normalize_email
from docs_admin.services.passwords import PasswordHasher
from docs_admin.storage.base import Collection, Record, to_timestamp, utcnow

LOGGER = logging.getLogger(__name__)

DEMO_USERS: tuple[dict[str, str], ...] = (
    {
        "email": "admin@example.com",
        "name": "System Administrator",
        "password": "admin123",
        "role": "admin",
    },
    {
        "email": "member@example.com",
        "name": "Team Member",
        "password": "member123",
        "role": "member",
    },
    {
        "email": "customer@example.com",
        "name": "Customer User",
        "password": "customer123",
        "role": "customer",
    },
)


def _parse(records: Iterable[Record]) -> list[Account]:
    accounts = []
    for record in records:
        try:
            accounts.append(Account.model_validate(record))
        except SchemaError:
            LOGGER.warning("Skipping malformed account record %s", record.get("id"))
    return accounts


def _first_valid(record: Optional[Record]) -> Optional[Account]:
    parsed = _parse([record]) if record else []
    return parsed[0] if parsed else None


class UserStore:
    def __init__(self, collection: Collection, hasher: PasswordHasher) -> None:
        self._collection = collection
        self._hasher = hasher

    def list_users(self) -> list[Account]:
        return _parse(self._collection.list_all())

    def get_by_email(self, email: str) -> Optional[Account]:
        record = self._collection.get_by_field("email", normalize_email(email))
        return _first_valid(record)

    def get_by_id(self, user_id: str) -> Optional[Account]:
        record = self._collection.get_by_field("id", user_id)
        return _first_valid(record)

    def create_user(self, email: str, name: str, role: str, password: str) -> Account:
        email = normalize_email(email)
        # Malformed records still hold their email.
        if self._collection.get_by_field("email", email) is not None:
            raise ConflictError()
        stored = self._collection.insert(
            {
                "email": email,
                "name": name,
                "password_hash": self._hasher.hash(password),
                "role": role,
                "is_active": True,
                "last_login": None,
            }
        )
        return Account.model_validate(stored)

    def set_active(self, user_id: str, is_active: bool) -> Optional[Account]:
        stored = self._collection.update(user_id, {"is_active": is_active})
        return _first_valid(stored)

    def record_login(self, user_id: str) -> Optional[Account]:
        stored = self._collection.update(user_id, {"last_login": to_timestamp(utcnow())})
        return _first_valid(stored)

    def delete_user(self, user_id: str) -> bool:
        return self._collection.delete(user_id)

    def check_password(self, account: Account, password: str) -> bool:
        return self._hasher.verify(password, account.password_hash)

    def seed_demo_users(self) -> int:
        if self._collection.snapshot():
            return 0
        for entry in DEMO_USERS:
            self.create_user(entry["email"], entry["name"], entry["role"], entry["password"])
        LOGGER.info("Default users created")
        return len(DEMO_USERS)
