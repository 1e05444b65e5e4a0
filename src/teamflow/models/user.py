"""User domain models built with SQLModel."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import TimestampMixin, enum_column_type


class UserRole(str, Enum):
    """Global roles supported by the authorization layer."""

    USER = "user"
    ADMIN = "admin"


class UserBase(SQLModel, table=False):
    """Shared attributes for user models."""

    name: str = Field(
        max_length=100,
        sa_column=sa.Column(sa.String(length=100), nullable=False),
    )
    email: str = Field(
        max_length=320,
        sa_column=sa.Column(sa.String(length=320), nullable=False, unique=True),
    )
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=sa.Column(
            enum_column_type(UserRole, "user_role"),
            nullable=False,
            server_default=UserRole.USER.value,
        ),
    )


class User(UserBase, TimestampMixin, table=True):
    """Persistent user model.

    ``password`` normally holds a bcrypt hash, but rows imported from older
    deployments may still carry plaintext or truncated hashes; these are
    upgraded on the next successful login.
    """

    __tablename__ = "users"
    __table_args__ = (sa.Index("ix_users_email", "email"),)

    id: int | None = Field(default=None, primary_key=True)
    password: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


__all__ = ["User", "UserBase", "UserRole"]
