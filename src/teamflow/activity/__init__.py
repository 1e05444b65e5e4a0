"""Activity log helpers."""

from __future__ import annotations

from .service import ActivityLogService, describe_changes

__all__ = ["ActivityLogService", "describe_changes"]
