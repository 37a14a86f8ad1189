from typing import Optional

import pytest
from fastapi.testclient import TestClient

from docs_admin.config import Settings
from docs_admin.errors import EmailSendError
from docs_admin.main import create_app
from docs_admin.services.auth import AuthService
from docs_admin.services.directory import DirectoryService
from docs_admin.services.otp import OtpStore
from docs_admin.services.passwords import PasswordHasher
from docs_admin.services.users import UserStore
from docs_admin.storage.base import ONE_TIME_PASSCODES, USERS
from docs_admin.storage.memory import MemoryBackend


class RecordingMailer:
    def __init__(self) -> None:
        self.codes: list[tuple[str, str]] = []
        self.welcomes: list[tuple[str, str]] = []
        self.fail = False

    def send_otp(self, to_email: str, code: str, name: Optional[str] = None) -> None:
        if self.fail:
            raise EmailSendError("SMTP unavailable")
        self.codes.append((to_email, code))

    def send_welcome(self, to_email: str, name: str, role: str, password: str) -> None:
        if self.fail:
            raise EmailSendError("SMTP unavailable")
        self.welcomes.append((to_email, password))

    def last_code(self, email: str) -> str:
        return [code for to_email, code in self.codes if to_email == email][-1]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        jwt_secret="test-secret",
        otp_debug=False,
        storage_backend="memory",
        seed_demo_users=False,
        bcrypt_rounds=4,
        smtp_host="",
    )


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def user_store(backend, settings) -> UserStore:
    return UserStore(backend.collection(USERS), PasswordHasher(settings.bcrypt_rounds))


@pytest.fixture
def otp_store(backend, settings) -> OtpStore:
    return OtpStore(backend.collection(ONE_TIME_PASSCODES), settings.otp_expiry_minutes)


@pytest.fixture
def auth_service(user_store, otp_store, mailer, settings) -> AuthService:
    return AuthService(user_store, otp_store, mailer, settings)


@pytest.fixture
def directory(user_store, mailer) -> DirectoryService:
    return DirectoryService(user_store, mailer)


@pytest.fixture
def admin_account(user_store):
    return user_store.create_user("a@x.com", "Admin", "admin", "admin123")


@pytest.fixture
def member_account(user_store):
    return user_store.create_user("member@x.com", "Member", "member", "member123")


@pytest.fixture
def client(settings, backend, mailer):
    app = create_app(settings=settings, backend=backend, mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client
