from datetime import datetime, timedelta, timezone

import pytest

from docs_admin.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StorageError,
)
from docs_admin.schemas.tokens import SessionClaim
from docs_admin.schemas.users import UserCreate
from docs_admin.services.passwords import PasswordHasher
from docs_admin.services.users import DEMO_USERS, UserStore
from docs_admin.storage.base import USERS
from docs_admin.storage.files import FileBackend


def _claim_for(account) -> SessionClaim:
    now = datetime.now(timezone.utc)
    return SessionClaim(
        id=account.id,
        email=account.email,
        name=account.name,
        role=account.role,
        issued_at=now,
        expires_at=now + timedelta(days=7),
    )


def test_list_hides_password_hashes(directory, admin_account, member_account):
    users = directory.list_users(_claim_for(admin_account))

    assert {user.email for user in users} == {"a@x.com", "member@x.com"}
    assert all("password_hash" not in user.model_dump() for user in users)


def test_create_with_generated_password(directory, user_store, mailer, admin_account):
    created = directory.create_user(
        _claim_for(admin_account),
        UserCreate(email="New@X.com", name="New Person", role="customer"),
    )

    assert created.email == "new@x.com"
    assert created.is_active is True
    (to_email, password), = mailer.welcomes
    assert to_email == "new@x.com"
    assert len(password) == 16
    stored = user_store.get_by_email("new@x.com")
    assert stored.password_hash != password
    assert user_store.check_password(stored, password)


def test_create_with_supplied_password(directory, user_store, admin_account):
    directory.create_user(
        _claim_for(admin_account),
        UserCreate(email="set@x.com", name="Set", role="member", password="chosen-pass"),
    )

    assert user_store.check_password(user_store.get_by_email("set@x.com"), "chosen-pass")


def test_duplicate_email_is_rejected(directory, user_store, admin_account):
    caller = _claim_for(admin_account)
    directory.create_user(caller, UserCreate(email="dup@x.com", name="One", role="member"))

    with pytest.raises(ConflictError):
        directory.create_user(caller, UserCreate(email="DUP@x.com", name="Two", role="member"))

    assert [u.email for u in user_store.list_users()].count("dup@x.com") == 1


def test_welcome_mail_failure_keeps_account(directory, user_store, mailer, admin_account):
    mailer.fail = True

    directory.create_user(
        _claim_for(admin_account), UserCreate(email="late@x.com", name="Late", role="member")
    )

    assert user_store.get_by_email("late@x.com") is not None


def test_set_active_toggles_flag(directory, admin_account, member_account):
    caller = _claim_for(admin_account)

    assert directory.set_active(caller, member_account.id, False).is_active is False
    assert directory.set_active(caller, member_account.id, True).is_active is True


def test_set_active_unknown_id(directory, admin_account):
    with pytest.raises(NotFoundError):
        directory.set_active(_claim_for(admin_account), "missing", False)


def test_delete_user(directory, user_store, admin_account, member_account):
    directory.delete_user(_claim_for(admin_account), member_account.id)

    assert user_store.get_by_id(member_account.id) is None
    with pytest.raises(NotFoundError):
        directory.delete_user(_claim_for(admin_account), member_account.id)


def test_non_admin_cannot_delete(directory, user_store, admin_account, member_account):
    with pytest.raises(AuthorizationError):
        directory.delete_user(_claim_for(member_account), admin_account.id)

    assert user_store.get_by_id(admin_account.id) is not None


def test_non_admin_rejected_before_validation(directory, member_account):
    with pytest.raises(AuthorizationError):
        directory.set_active(_claim_for(member_account), "missing", False)


def test_anonymous_caller_rejected(directory):
    with pytest.raises(AuthenticationError):
        directory.list_users(None)


def test_stale_admin_session_rejected(directory, user_store, admin_account):
    caller = _claim_for(admin_account)
    user_store.set_active(admin_account.id, False)

    with pytest.raises(AuthorizationError):
        directory.list_users(caller)


def test_seed_demo_users_only_when_empty(user_store):
    assert user_store.seed_demo_users() == len(DEMO_USERS)
    assert user_store.seed_demo_users() == 0
    assert {u.role for u in user_store.list_users()} == {"admin", "member", "customer"}
    admin = user_store.get_by_email("admin@example.com")
    assert user_store.check_password(admin, "admin123")


def test_email_stays_unique_after_many_creates(directory, user_store, admin_account):
    caller = _claim_for(admin_account)
    for email in ["x@x.com", "y@x.com", "x@x.com", "X@x.com", "y@x.com", "a@x.com"]:
        try:
            directory.create_user(caller, UserCreate(email=email, name="Someone", role="member"))
        except ConflictError:
            pass

    emails = [u.email for u in user_store.list_users()]
    assert len(emails) == len(set(emails)) == 3


def test_seeding_refuses_unreadable_directory(tmp_path, settings):
    path = tmp_path / "users.json"
    path.write_text('[{"email": "real@x.com", "name": "Re', encoding="utf-8")
    users = UserStore(FileBackend(tmp_path).collection(USERS), PasswordHasher(settings.bcrypt_rounds))

    with pytest.raises(StorageError):
        users.seed_demo_users()

    assert path.read_text(encoding="utf-8") == '[{"email": "real@x.com", "name": "Re'


def test_malformed_record_is_skipped_but_keeps_its_email(directory, user_store, backend, admin_account):
    stored = backend.collection(USERS).insert({"email": "odd@x.com", "role": "superuser"})

    assert user_store.get_by_id(stored["id"]) is None
    assert user_store.get_by_email("odd@x.com") is None
    with pytest.raises(ConflictError):
        directory.create_user(
            _claim_for(admin_account), UserCreate(email="odd@x.com", name="Odd", role="member")
        )
