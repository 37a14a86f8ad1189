import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, StrictBool, field_validator

Role = Literal["admin", "member", "customer"]
ROLES: tuple[str, ...] = ("admin", "member", "customer")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(value: str) -> str:
    cleaned = normalize_email(value)
    if not EMAIL_PATTERN.match(cleaned):
        raise ValueError("Please enter a valid email address")
    return cleaned


class Account(BaseModel):
    id: str
    email: str
    name: str
    password_hash: str
    role: Role
    is_active: bool = True
    created_at: str
    last_login: Optional[str] = None


class PublicUser(BaseModel):
    id: str
    email: str
    name: str
    role: Role


class UserSummary(PublicUser):
    is_active: bool
    created_at: str
    last_login: Optional[str] = None


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=100)
    role: Role
    password: Optional[str] = Field(default=None, min_length=8, max_length=72)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name is required")
        return cleaned


class UserStatusUpdate(BaseModel):
    is_active: StrictBool = Field(alias="isActive")

    model_config = {"populate_by_name": True}


def to_public(account: Account) -> PublicUser:
    return PublicUser(
        id=account.id, email=account.email, name=account.name, role=account.role
    )


def to_summary(account: Account) -> UserSummary:
    return UserSummary(
        id=account.id,
        email=account.email,
        name=account.name,
        role=account.role,
        is_active=account.is_active,
        created_at=account.created_at,
        last_login=account.last_login,
    )
