"""Append-only audit trail rows."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin


class Activity(TimestampMixin, table=True):
    """A free-text record of a mutating action.

    ``user_name`` is a snapshot taken when the row is written so the feed
    still reads sensibly after the user is renamed or deleted.
    """

    __tablename__ = "activities"
    __table_args__ = (sa.Index("ix_activities_created_at", "created_at"),)

    id: int | None = Field(default=None, primary_key=True)
    action: str = Field(
        max_length=500,
        sa_column=sa.Column(sa.String(length=500), nullable=False),
    )
    user_id: int | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    user_name: str | None = Field(
        default=None,
        max_length=100,
        sa_column=sa.Column(sa.String(length=100), nullable=True),
    )


__all__ = ["Activity"]
