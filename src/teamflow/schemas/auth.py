"""Schemas describing authentication payloads."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models import UserRole
from .user import UserPublic

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"

_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter."),
    (re.compile(r"\d"), "Password must contain at least one number."),
    (
        re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]"),
        f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS}).",
    ),
)


def validate_password_policy(password: str) -> str:
    """Raise ``ValueError`` describing the first rule ``password`` breaks."""

    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            raise ValueError(message)
    return password


def normalise_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user."""

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: object) -> object:
        return normalise_email(value)

    @field_validator("password")
    @classmethod
    def _check_password_policy(cls, value: str) -> str:
        return validate_password_policy(value)


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: object) -> object:
        return normalise_email(value)

    @field_validator("email", "password")
    @classmethod
    def _require_value(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email and password are required.")
        return value


class AuthResponse(BaseModel):
    """Session token together with the authenticated user."""

    token: str
    user: UserPublic
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int


class AuthenticatedUser(BaseModel):
    """Caller identity taken from a verified token; no database lookup involved."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenClaims(BaseModel):
    """Validated JWT payload."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    id: int
    email: str
    role: UserRole
    exp: datetime
    iat: datetime


__all__ = [
    "AuthResponse",
    "AuthenticatedUser",
    "LoginRequest",
    "PASSWORD_MIN_LENGTH",
    "RegisterRequest",
    "TokenClaims",
    "normalise_email",
    "validate_password_policy",
]
