"""Unit tests for password hashing and access tokens"""

from datetime import timedelta
from loanwise.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed) is True
    assert verify_password("wrong-pass", hashed) is False


def test_verify_password_malformed_hash():
    assert verify_password("s3cret-pass", "not-a-bcrypt-hash") is False


def test_access_token_carries_user():
    token = create_access_token(7, "asha@example.com")
    payload = decode_access_token(token)

    assert payload["sub"] == "7"
    assert payload["email"] == "asha@example.com"


def test_expired_token_is_rejected():
    token = create_access_token(7, "asha@example.com", expires_delta=timedelta(minutes=-1))
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(7, "asha@example.com")
    assert decode_access_token(token[:-2] + "xx") is None
    assert decode_access_token("garbage") is None
