import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docs_admin.config import Settings, settings as default_settings
from docs_admin.dependencies import extract_token
from docs_admin.errors import ServiceError, StorageError
from docs_admin.routers import admin, auth, dev, public
from docs_admin.services.auth import AuthService
from docs_admin.services.diagnostics import Diagnostics
from docs_admin.services.directory import DirectoryService
from docs_admin.services.email import Mailer, SmtpMailer
from docs_admin.services.otp import OtpStore
from docs_admin.services.passwords import PasswordHasher
from docs_admin.services.tokens import verify_session_token
from docs_admin.services.users import UserStore
from docs_admin.storage.base import ONE_TIME_PASSCODES, USERS, StorageBackend
from docs_admin.storage.factory import build_backend

LOGGER = logging.getLogger(__name__)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    field = str(first.get("loc", ("",))[-1])
    if first.get("type") == "missing":
        return f"{field} is required"
    message = str(first.get("msg", "Invalid request."))
    return message.removeprefix("Value error, ")


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())
    backend = backend or build_backend(settings)
    mailer = mailer or SmtpMailer(settings)

    hasher = PasswordHasher(settings.bcrypt_rounds)
    user_store = UserStore(backend.collection(USERS), hasher)
    otp_store = OtpStore(backend.collection(ONE_TIME_PASSCODES), settings.otp_expiry_minutes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_demo_users:
            try:
                user_store.seed_demo_users()
            except StorageError:
                LOGGER.error("Skipped demo user seeding; user storage is unreadable")
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.user_store = user_store
    app.state.otp_store = otp_store
    app.state.auth_service = AuthService(user_store, otp_store, mailer, settings)
    app.state.directory = DirectoryService(user_store, mailer)
    app.state.diagnostics = Diagnostics(user_store, otp_store, backend.storage_type)

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def resolve_identity(request: Request, call_next):
        # Verified once here; handlers read request.state.identity.
        request.state.identity = verify_session_token(extract_token(request), settings)
        return await call_next(request)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _failure(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _failure(500, "Internal server error")

    app.include_router(public.router)
    app.include_router(auth.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(admin.router)
    app.include_router(admin.router, prefix="/api")
    if settings.otp_debug:
        LOGGER.warning("OTP_DEBUG is on; development passcode routes are mounted")
        app.include_router(dev.router)

    return app


app = create_app()
