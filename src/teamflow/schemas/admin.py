"""Schemas for privileged user management."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..models import UserRole
from .auth import PASSWORD_MIN_LENGTH, normalise_email


class AdminUserUpdate(BaseModel):
    """Partial update of another user's profile or role."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    role: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: Any) -> Any:
        return normalise_email(value)

    @field_validator("role")
    @classmethod
    def _check_role(cls, value: str | None) -> str | None:
        if value is None:
            return value
        allowed = {role.value for role in UserRole}
        if value not in allowed:
            raise ValueError('Invalid role. Must be "admin" or "user".')
        return value

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "AdminUserUpdate":
        if not self.model_dump(exclude_unset=True, exclude_none=True):
            raise ValueError("No fields to update.")
        return self


class PasswordResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(validation_alias=AliasChoices("new_password", "newPassword"))

    @field_validator("new_password")
    @classmethod
    def _check_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
        return value


class UserStats(BaseModel):
    total: int
    admins: int
    users: int
    recent: int


__all__ = ["AdminUserUpdate", "PasswordResetRequest", "UserStats"]
