from datetime import timedelta

import pytest
from jose import ExpiredSignatureError

from smartauto.core.deps import role_allowed
from smartauto.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from smartauto.models.enums import Role


def test_password_hash_roundtrip():
    hashed = get_password_hash("Secret123")
    assert hashed != "Secret123"
    assert verify_password("Secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_long_passwords_are_truncated_consistently():
    long_password = "x" * 100
    hashed = get_password_hash(long_password)
    assert verify_password(long_password, hashed)


def test_malformed_hash_does_not_verify():
    assert verify_password("Secret123", "not-a-bcrypt-hash") is False


def test_token_carries_subject_as_string():
    token = create_access_token({"sub": 42, "role": "owner"})
    payload = decode_access_token(token)
    assert payload["sub"] == "42"
    assert payload["role"] == "owner"


def test_tampered_token_decodes_to_none():
    token = create_access_token({"sub": 1})
    assert decode_access_token(token + "x") is None


def test_expired_token_is_reported():
    token = create_access_token({"sub": 1}, expires_delta=timedelta(minutes=-1))
    with pytest.raises(ExpiredSignatureError):
        decode_access_token(token)


def test_roles_are_flat():
    assert role_allowed("admin", (Role.admin,))
    assert role_allowed("owner", (Role.owner, Role.admin))
    assert not role_allowed("customer", (Role.owner, Role.admin))
    # admin does not imply owner
    assert not role_allowed("admin", (Role.owner,))
