from __future__ import annotations

from unittest.mock import patch

import pytest
from argon2.exceptions import HashingError

from deskauth.core.auth import argon2_auth
from deskauth.core.auth.argon2_auth import (
    CredentialHasher,
    CredentialHashingError,
    MalformedHashError,
)


def test_hash_never_stores_plaintext_and_verifies(hasher: CredentialHasher) -> None:
    password = "TestPassword123"

    encoded = hasher.hash(password)

    assert encoded != password
    assert password not in encoded
    assert encoded.startswith("$argon2id$v=19$m=1024,t=1,p=1$")
    assert hasher.verify(password, encoded) is True


def test_wrong_password_fails_verification(hasher: CredentialHasher) -> None:
    encoded = hasher.hash("TestPassword123")

    assert hasher.verify("WrongPassword", encoded) is False
    assert hasher.verify("TestPassword124", encoded) is False
    assert hasher.verify("", encoded) is False


def test_same_password_hashes_differently(hasher: CredentialHasher) -> None:
    first = hasher.hash("GoodPass123")
    second = hasher.hash("GoodPass123")

    assert first != second
    assert hasher.parse(first).salt != hasher.parse(second).salt
    assert hasher.verify("GoodPass123", first) is True
    assert hasher.verify("GoodPass123", second) is True


def test_empty_password_can_be_hashed(hasher: CredentialHasher) -> None:
    encoded = hasher.hash("")

    assert hasher.verify("", encoded) is True
    assert hasher.verify("x", encoded) is False


def test_unicode_password_round_trip(hasher: CredentialHasher) -> None:
    encoded = hasher.hash("Пароль٣abc")

    assert hasher.verify("Пароль٣abc", encoded) is True


@pytest.mark.parametrize(
    "encoded",
    [
        "not-a-valid-hash-string",
        "",
        "$argon2id$v=19$m=1024,t=1,p=1$",
        "$argon2id$v=19$m=1024,t=1$c2FsdHNhbHQ$aGFzaGhhc2g",
        "$bcrypt$v=19$m=1024,t=1,p=1$c2FsdHNhbHQ$aGFzaGhhc2g",
        "$argon2id$v=19$m=1024,t=1,p=1$!!notbase64!!$aGFzaGhhc2g",
    ],
)
def test_malformed_hash_raises_instead_of_returning_false(
    hasher: CredentialHasher,
    encoded: str,
) -> None:
    with pytest.raises(MalformedHashError):
        hasher.verify("GoodPass123", encoded)


def test_parse_exposes_embedded_parameters(hasher: CredentialHasher) -> None:
    record = hasher.parse(hasher.hash("GoodPass123"))

    assert record.algorithm == "argon2id"
    assert record.version == 19
    assert (record.memory_cost, record.time_cost, record.parallelism) == (1024, 1, 1)
    assert len(record.salt) == 16
    assert len(record.derived_key) == 32
    assert "salt" not in repr(record)


def test_old_parameters_still_verify_under_new_hasher() -> None:
    old = CredentialHasher(memory_cost=512, time_cost=1, parallelism=1)
    new = CredentialHasher(memory_cost=2048, time_cost=2, parallelism=2)
    encoded = old.hash("GoodPass123")

    assert new.verify("GoodPass123", encoded) is True
    assert new.verify("BadPass123", encoded) is False


def test_needs_rehash_follows_parameters(hasher: CredentialHasher) -> None:
    encoded = hasher.hash("GoodPass123")
    stronger = CredentialHasher(memory_cost=2048, time_cost=1, parallelism=1)

    assert hasher.needs_rehash(encoded) is False
    assert stronger.needs_rehash(encoded) is True


def test_needs_rehash_rejects_malformed_hash(hasher: CredentialHasher) -> None:
    with pytest.raises(MalformedHashError):
        hasher.needs_rehash("not-a-valid-hash-string")


def test_library_failure_becomes_hashing_error(hasher: CredentialHasher) -> None:
    with patch(
        "argon2.PasswordHasher.hash",
        side_effect=HashingError("boom"),
    ):
        with pytest.raises(CredentialHashingError):
            hasher.hash("GoodPass123")


def test_rng_failure_becomes_hashing_error(hasher: CredentialHasher) -> None:
    with patch(
        "argon2.PasswordHasher.hash",
        side_effect=OSError("no entropy"),
    ):
        with pytest.raises(CredentialHashingError):
            hasher.hash("GoodPass123")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"time_cost": 0},
        {"parallelism": 0},
        {"memory_cost": 7, "parallelism": 1},
        {"hash_length": 8},
        {"salt_length": 4},
    ],
)
def test_invalid_parameters_rejected(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        CredentialHasher(**kwargs)


def test_parameters_property(hasher: CredentialHasher) -> None:
    assert hasher.parameters == {
        "memory_cost": 1024,
        "time_cost": 1,
        "parallelism": 1,
        "hash_length": 32,
        "salt_length": 16,
    }


def test_module_functions_use_default_hasher(
    hasher: CredentialHasher,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(argon2_auth, "_default_hasher", hasher)

    encoded = argon2_auth.hash_password("GoodPass123")

    assert encoded.startswith("$argon2id$v=19$m=1024,t=1,p=1$")
    assert argon2_auth.verify_password("GoodPass123", encoded) is True
    assert argon2_auth.verify_password("GoodPass124", encoded) is False


def test_lone_surrogate_password_hashes_and_verifies(hasher: CredentialHasher) -> None:
    password = "GoodPass123\ud800"

    encoded = hasher.hash(password)

    assert hasher.verify(password, encoded) is True
    assert hasher.verify("GoodPass123", encoded) is False
    assert hasher.verify("GoodPass123\ud801", encoded) is False
