from typing import Optional

from fastapi import Request

from docs_admin.config import Settings
from docs_admin.schemas.tokens import SessionClaim
from docs_admin.services.auth import AuthService
from docs_admin.services.diagnostics import Diagnostics
from docs_admin.services.directory import DirectoryService
from docs_admin.services.otp import OtpStore
from docs_admin.services.users import UserStore

SESSION_COOKIE = "auth-token"


def extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials:
        return None
    return credentials.strip()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_directory(request: Request) -> DirectoryService:
    return request.app.state.directory


def get_diagnostics(request: Request) -> Diagnostics:
    return request.app.state.diagnostics


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_otp_store(request: Request) -> OtpStore:
    return request.app.state.otp_store


def get_identity(request: Request) -> Optional[SessionClaim]:
    return getattr(request.state, "identity", None)


def require_admin(request: Request) -> SessionClaim:
    """Token must carry the admin role and its account must still be an active admin."""
    identity = get_identity(request)
    get_directory(request).authorize(identity, "use the admin console")
    return identity
