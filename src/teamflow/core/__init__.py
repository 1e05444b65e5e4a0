"""Settings, logging and request-context primitives shared by every layer."""

from __future__ import annotations

from .config import Settings, get_settings
from .context import REQUEST_ID_HEADER, get_request_id, get_user_id
from .logging import configure_logging

__all__ = [
    "REQUEST_ID_HEADER",
    "Settings",
    "configure_logging",
    "get_request_id",
    "get_settings",
    "get_user_id",
]
