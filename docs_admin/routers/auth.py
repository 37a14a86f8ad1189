import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from docs_admin.config import Settings
from docs_admin.dependencies import (
    SESSION_COOKIE,
    extract_token,
    get_auth_service,
    get_identity,
    get_settings,
)
from docs_admin.errors import AuthenticationError
from docs_admin.schemas.otp import AuthResponse, LoginRequest, VerifyRequest
from docs_admin.schemas.tokens import SessionClaim
from docs_admin.schemas.users import PublicUser
from docs_admin.services.auth import AuthService
from docs_admin.services.tokens import peek_session_token

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
}


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
def login(
    payload: LoginRequest, auth: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    auth.request_code(payload.email, payload.password)
    return AuthResponse(success=True, message="Verification code sent to your email address.")


@router.post("/verify", response_model=AuthResponse, response_model_exclude_none=True)
def verify(
    payload: VerifyRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    result = auth.verify_code(payload.email, payload.code)
    response.set_cookie(
        SESSION_COOKIE,
        result.token,
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return AuthResponse(
        success=True, message="Login successful.", token=result.token, user=result.user
    )


@router.post("/logout")
def logout(
    request: Request, response: Response, settings: Settings = Depends(get_settings)
) -> dict:
    claim = peek_session_token(request.cookies.get(SESSION_COOKIE))
    if claim is not None:
        LOGGER.info("User %s logged out", claim.email)
    response.delete_cookie(
        SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    response.headers.update(NO_STORE_HEADERS)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/whoami")
@router.get("/me")
def whoami(request: Request, identity: Optional[SessionClaim] = Depends(get_identity)) -> dict:
    if identity is None:
        message = "Invalid token" if extract_token(request) else "No token provided"
        raise AuthenticationError(message)
    user = PublicUser(id=identity.id, email=identity.email, name=identity.name, role=identity.role)
    return {"success": True, "user": user.model_dump()}
