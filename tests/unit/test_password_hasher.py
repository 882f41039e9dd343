"""Unit tests for Argon2 password hashing."""

import pytest
from argon2 import PasswordHasher

from vidtube.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)


def test_hash_is_salted_and_verifies():
    first = hash_password("Secret1")
    second = hash_password("Secret1")

    assert first.startswith("$argon2id$")
    assert first != second
    assert "Secret1" not in first
    assert verify_password("Secret1", first)
    assert verify_password("Secret1", second)


def test_wrong_password_does_not_verify():
    hashed = hash_password("Secret1")
    assert verify_password("secret1", hashed) is False
    assert verify_password("Secret2", hashed) is False


def test_empty_password_is_rejected_when_hashing():
    with pytest.raises(ValueError):
        hash_password("")


@pytest.mark.parametrize("password, hashed", [("", "$argon2id$whatever"), ("Secret1", "")])
def test_empty_inputs_do_not_verify(password, hashed):
    assert verify_password(password, hashed) is False


def test_malformed_hash_does_not_verify():
    assert verify_password("Secret1", "not-a-hash") is False


def test_current_parameters_do_not_need_rehash():
    assert needs_rehash(hash_password("Secret1")) is False


def test_weaker_parameters_need_rehash():
    weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("Secret1")
    assert verify_password("Secret1", weak)
    assert needs_rehash(weak) is True
