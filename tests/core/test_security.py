"""Tests for password hashing and access tokens."""

from datetime import timedelta

import pytest

from stockroom.core.entities.user import UserRole
from stockroom.core.exceptions import AuthError
from stockroom.core.security import (
    actor_from_token,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_hash_roundtrip(self):
        encoded = hash_password("Secret12!")
        assert encoded.startswith("pbkdf2_sha256$")
        assert verify_password("Secret12!", encoded)
        assert not verify_password("Secret12?", encoded)

    def test_salt_differs_per_hash(self):
        assert hash_password("Secret12!") != hash_password("Secret12!")

    def test_garbage_hash_does_not_verify(self):
        assert not verify_password("Secret12!", "not-a-hash")
        assert not verify_password("Secret12!", "md5$1$salt$digest")


class TestTokens:
    def test_actor_from_token(self):
        token = create_access_token(5, "carol", UserRole.ADMIN)
        actor = actor_from_token(token)
        assert actor.user_id == 5
        assert actor.username == "carol"
        assert actor.role == UserRole.ADMIN

    def test_expired_token_rejected(self):
        token = create_access_token(5, "carol", expires_delta=timedelta(seconds=-5))
        with pytest.raises(AuthError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.details["reason"] == "token_expired"

    def test_tampered_token_rejected(self):
        _, signature = create_access_token(5, "carol").split(".")
        other_payload = create_access_token(6, "dave").split(".")[0]
        with pytest.raises(AuthError) as exc_info:
            decode_access_token(f"{other_payload}.{signature}")
        assert exc_info.value.details["reason"] == "invalid_signature"

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
    def test_malformed_token_rejected(self, token):
        with pytest.raises(AuthError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.details["reason"] == "malformed_token"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_token_signed_with_other_key_rejected(self, monkeypatch):
        from stockroom.config import reset_settings

        token = create_access_token(5, "carol")
        monkeypatch.setenv("AUTH_SECRET_KEY", "another-key")
        reset_settings()
        with pytest.raises(AuthError):
            decode_access_token(token)
