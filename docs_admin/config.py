import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=True)


def _env_bool(name: str, default: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "Docs Admin")
    environment: str = os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "development"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    jwt_secret: str = os.getenv("JWT_SECRET", "")
    jwt_algorithm: str = os.getenv("ALGORITHM", "HS256")
    session_ttl_days: int = int(os.getenv("SESSION_TTL_DAYS", "7"))
    otp_expiry_minutes: int = int(os.getenv("OTP_EXPIRY_MINUTES", "5"))
    otp_max_attempts: int = int(os.getenv("OTP_MAX_ATTEMPTS", "3"))
    otp_debug: bool = _env_bool("OTP_DEBUG", False)
    smtp_host: str = os.getenv("SMTP_HOST", "")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASS", "")
    smtp_from: str = os.getenv("FROM_EMAIL") or os.getenv("SMTP_FROM", "")
    smtp_timeout_seconds: int = int(os.getenv("SMTP_TIMEOUT_SECONDS", "15"))
    storage_backend: str = os.getenv("STORAGE_BACKEND", "").strip().lower()
    storage_dir: str = os.getenv("STORAGE_DIR", "").strip()
    managed_config_url: str = os.getenv("MANAGED_CONFIG_URL", "").strip()
    seed_demo_users: bool = _env_bool("SEED_DEMO_USERS", True)
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 86400

    def selected_backend(self) -> str:
        if self.storage_backend:
            return self.storage_backend
        if self.managed_config_url:
            return "managed"
        if self.storage_dir:
            return "file"
        return "memory"


settings = Settings()
