"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ..models import UserRole


class UserPublic(BaseModel):
    """Public representation of a user; never carries the password column."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime | None = None


__all__ = ["UserPublic"]
