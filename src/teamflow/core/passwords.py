"""Password verification across the stored-hash formats found in production.

Older deployments wrote three kinds of values into ``users.password``:

* proper bcrypt hashes (``$2a$``/``$2b$``/``$2y$``), sometimes with trailing
  whitespace picked up by a bad import;
* bcrypt hashes whose leading ``$2`` was lost (``b$10$...``);
* plaintext passwords.

Each format has its own strategy. A strategy reports whether the submitted
password matched and, when the stored value should be upgraded, the
replacement hash to persist. Callers persist the replacement best-effort; a
failed write never fails the login.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .security import get_password_hash, pwd_context

BCRYPT_HASH_LENGTH = 60

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
_TRUNCATED_BCRYPT_PATTERN = re.compile(r"^[aby]\$\d{2}\$")
_MISSING_PREFIX = "$2"


class HashFormat(str, Enum):
    BCRYPT = "bcrypt"
    TRUNCATED_BCRYPT = "truncated_bcrypt"
    PLAINTEXT = "plaintext"


@dataclass(slots=True, frozen=True)
class PasswordCheck:
    """Outcome of comparing a submitted password with a stored value."""

    matched: bool
    hash_format: HashFormat
    replacement_hash: str | None = None

    @property
    def rehash_needed(self) -> bool:
        return self.replacement_hash is not None


def detect_hash_format(stored: str) -> HashFormat:
    if stored.startswith(_BCRYPT_PREFIXES):
        return HashFormat.BCRYPT
    if _TRUNCATED_BCRYPT_PATTERN.match(stored):
        return HashFormat.TRUNCATED_BCRYPT
    return HashFormat.PLAINTEXT


def _bcrypt_matches(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        # Malformed hash bodies are a non-match, not an error.
        return False


def _plaintext_matches(password: str, stored: str) -> bool:
    return secrets.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def _check_bcrypt(password: str, stored: str) -> PasswordCheck:
    if _bcrypt_matches(password, stored):
        return PasswordCheck(matched=True, hash_format=HashFormat.BCRYPT)
    trimmed = stored.strip()
    if trimmed != stored and _bcrypt_matches(password, trimmed):
        return PasswordCheck(matched=True, hash_format=HashFormat.BCRYPT, replacement_hash=trimmed)
    return PasswordCheck(matched=False, hash_format=HashFormat.BCRYPT)


def _check_truncated_bcrypt(password: str, stored: str) -> PasswordCheck:
    repaired = f"{_MISSING_PREFIX}{stored.strip()}"
    if _bcrypt_matches(password, repaired):
        return PasswordCheck(
            matched=True,
            hash_format=HashFormat.TRUNCATED_BCRYPT,
            replacement_hash=repaired,
        )
    if _plaintext_matches(password, stored):
        return PasswordCheck(
            matched=True,
            hash_format=HashFormat.TRUNCATED_BCRYPT,
            replacement_hash=get_password_hash(password),
        )
    return PasswordCheck(matched=False, hash_format=HashFormat.TRUNCATED_BCRYPT)


def _check_plaintext(password: str, stored: str) -> PasswordCheck:
    if not (_plaintext_matches(password, stored) or _plaintext_matches(password, stored.strip())):
        return PasswordCheck(matched=False, hash_format=HashFormat.PLAINTEXT)
    replacement = get_password_hash(password) if len(stored) < BCRYPT_HASH_LENGTH else None
    return PasswordCheck(matched=True, hash_format=HashFormat.PLAINTEXT, replacement_hash=replacement)


_STRATEGIES: dict[HashFormat, Callable[[str, str], PasswordCheck]] = {
    HashFormat.BCRYPT: _check_bcrypt,
    HashFormat.TRUNCATED_BCRYPT: _check_truncated_bcrypt,
    HashFormat.PLAINTEXT: _check_plaintext,
}


def check_password(password: str, stored: str | None) -> PasswordCheck:
    """Compare ``password`` against ``stored`` using the strategy for its format."""

    if not password or not stored:
        return PasswordCheck(matched=False, hash_format=HashFormat.PLAINTEXT)
    hash_format = detect_hash_format(stored)
    return _STRATEGIES[hash_format](password, stored)


def verify_password(password: str, stored: str | None) -> bool:
    return check_password(password, stored).matched


__all__ = [
    "BCRYPT_HASH_LENGTH",
    "HashFormat",
    "PasswordCheck",
    "check_password",
    "detect_hash_format",
    "verify_password",
]
