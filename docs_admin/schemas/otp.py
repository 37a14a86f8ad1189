from typing import Optional

from pydantic import BaseModel, Field, field_validator

from docs_admin.schemas.users import PublicUser, validate_email

OTP_LENGTH = 6


class OneTimePasscode(BaseModel):
    id: str
    email: str
    code: str
    expires_at: str
    attempts: int = 0
    used: bool = False
    created_at: str


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)


class VerifyRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    code: str = Field(min_length=1, max_length=16)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("code")
    @classmethod
    def strip_code(cls, value: str) -> str:
        return value.strip()


class AuthResponse(BaseModel):
    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[PublicUser] = None


class DevOtpRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    code: Optional[str] = Field(default=None, min_length=OTP_LENGTH, max_length=OTP_LENGTH)
    expiry_minutes: int = Field(default=10, ge=1, le=60)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)
