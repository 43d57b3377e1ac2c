"""
Unit tests for password hashing and token handling.
"""
from datetime import timedelta

import pytest
from jose import jwt

from app.core.exceptions import BadgeFinderError, ErrorKind
from app.core.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    token_max_age,
    verify_password,
)


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = get_password_hash("campfire123")
        assert hashed != "campfire123"
        assert verify_password("campfire123", hashed)
        assert not verify_password("campfire124", hashed)

    def test_missing_hash_never_verifies(self):
        assert not verify_password("campfire123", None)


class TestTokens:
    def test_claims_and_subject(self, settings):
        token = create_access_token(settings, "user-1", {"email": "akela@scouts.org.uk"})
        payload = decode_token(settings, token)
        assert payload["sub"] == "user-1"
        assert payload["email"] == "akela@scouts.org.uk"
        assert "exp" in payload

    def test_expired(self, settings):
        token = create_access_token(settings, "user-1", expires_delta=timedelta(minutes=-1))
        with pytest.raises(BadgeFinderError) as exc_info:
            decode_token(settings, token)
        assert exc_info.value.kind is ErrorKind.TOKEN_EXPIRED

    def test_wrong_secret(self, settings):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256")
        with pytest.raises(BadgeFinderError) as exc_info:
            decode_token(settings, token)
        assert exc_info.value.kind is ErrorKind.TOKEN_INVALID

    def test_missing_subject(self, settings):
        token = jwt.encode({"email": "akela@scouts.org.uk"}, settings.jwt_secret_key, algorithm="HS256")
        with pytest.raises(BadgeFinderError) as exc_info:
            decode_token(settings, token)
        assert exc_info.value.kind is ErrorKind.TOKEN_INVALID

    def test_cookie_lifetime_matches_token(self, settings):
        assert token_max_age(settings) == settings.access_token_expire_minutes * 60
