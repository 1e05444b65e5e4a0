from __future__ import annotations

import pytest

from teamflow.core.passwords import (
    BCRYPT_HASH_LENGTH,
    HashFormat,
    check_password,
    detect_hash_format,
    verify_password,
)
from teamflow.core.security import get_password_hash, pwd_context

PASSWORD = "Sunny#Day42"


@pytest.fixture(scope="module")
def bcrypt_hash() -> str:
    return get_password_hash(PASSWORD)


def test_detect_hash_format() -> None:
    assert detect_hash_format("$2b$10$abcdefghijklmnopqrstuv") is HashFormat.BCRYPT
    assert detect_hash_format("$2y$12$abcdefghijklmnopqrstuv") is HashFormat.BCRYPT
    assert detect_hash_format("b$10$abcdefghijklmnopqrstuv") is HashFormat.TRUNCATED_BCRYPT
    assert detect_hash_format("a$12$abc") is HashFormat.TRUNCATED_BCRYPT
    assert detect_hash_format("hunter2") is HashFormat.PLAINTEXT
    assert detect_hash_format("b$1$not-a-cost") is HashFormat.PLAINTEXT


def test_bcrypt_match_needs_no_migration(bcrypt_hash: str) -> None:
    outcome = check_password(PASSWORD, bcrypt_hash)

    assert outcome.matched is True
    assert outcome.hash_format is HashFormat.BCRYPT
    assert outcome.rehash_needed is False


def test_bcrypt_mismatch(bcrypt_hash: str) -> None:
    outcome = check_password("wrong-password", bcrypt_hash)

    assert outcome.matched is False
    assert outcome.rehash_needed is False


def test_bcrypt_with_surrounding_whitespace_migrates_to_trimmed_hash(bcrypt_hash: str) -> None:
    outcome = check_password(PASSWORD, f"{bcrypt_hash}  \n")

    assert outcome.matched is True
    assert outcome.replacement_hash == bcrypt_hash


def test_truncated_bcrypt_is_repaired(bcrypt_hash: str) -> None:
    truncated = bcrypt_hash[2:]

    outcome = check_password(PASSWORD, truncated)

    assert outcome.matched is True
    assert outcome.hash_format is HashFormat.TRUNCATED_BCRYPT
    assert outcome.replacement_hash == bcrypt_hash


def test_truncated_format_falls_back_to_plaintext() -> None:
    stored = "b$10$literally-the-password"

    outcome = check_password(stored, stored)

    assert outcome.matched is True
    assert outcome.replacement_hash is not None
    assert pwd_context.verify(stored, outcome.replacement_hash)


def test_truncated_format_mismatch() -> None:
    assert check_password(PASSWORD, "b$10$not-a-real-hash").matched is False


def test_plaintext_match_is_migrated_to_bcrypt() -> None:
    outcome = check_password("letmein!", "letmein!")

    assert outcome.matched is True
    assert outcome.hash_format is HashFormat.PLAINTEXT
    assert outcome.replacement_hash is not None
    assert outcome.replacement_hash.startswith("$2")
    assert pwd_context.verify("letmein!", outcome.replacement_hash)


def test_plaintext_matches_trimmed_stored_value() -> None:
    assert check_password("letmein!", "  letmein!  ").matched is True


def test_long_plaintext_match_is_not_rehashed() -> None:
    stored = "x" * BCRYPT_HASH_LENGTH

    outcome = check_password(stored, stored)

    assert outcome.matched is True
    assert outcome.rehash_needed is False


def test_plaintext_comparison_handles_non_ascii() -> None:
    assert check_password("pässwörd", "pässwörd").matched is True
    assert check_password("passwort", "pässwörd").matched is False


@pytest.mark.parametrize(
    "stored",
    ["$2b$10$garbage", "$2a$", "$2y$99$" + "!" * 53],
)
def test_malformed_bcrypt_never_raises(stored: str) -> None:
    assert verify_password(PASSWORD, stored) is False


@pytest.mark.parametrize(
    ("password", "stored"),
    [("", "anything"), (PASSWORD, ""), (PASSWORD, None)],
)
def test_empty_inputs_do_not_match(password: str, stored: str | None) -> None:
    assert verify_password(password, stored) is False
