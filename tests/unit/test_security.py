"""
Unit tests for password hashing and token handling.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from contactbook.security import (
    DEFAULT_BCRYPT_ROUNDS,
    InvalidTokenError,
    PasswordHasher,
    TokenClaims,
    TokenService,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    @pytest.fixture
    def hasher(self):
        return PasswordHasher(rounds=4)

    def test_default_work_factor(self):
        assert DEFAULT_BCRYPT_ROUNDS == 10
        assert PasswordHasher().rounds == 10

    @pytest.mark.asyncio
    async def test_hash_is_salted_bcrypt(self, hasher):
        first = await hasher.hash("s3cret")
        second = await hasher.hash("s3cret")

        assert first.startswith("$2b$04$")
        assert first != "s3cret"
        assert first != second

    @pytest.mark.asyncio
    async def test_compare(self, hasher):
        hashed = await hasher.hash("s3cret")

        assert await hasher.compare("s3cret", hashed) is True
        assert await hasher.compare("wrong", hashed) is False

    @pytest.mark.asyncio
    async def test_long_password_cut_to_72_bytes(self, hasher):
        password = "x" * 80
        hashed = await hasher.hash(password)

        assert await hasher.compare(password, hashed) is True
        # Only the first 72 bytes take part in the digest
        assert await hasher.compare("x" * 72 + "y" * 8, hashed) is True
        assert await hasher.compare("y" * 80, hashed) is False

    @pytest.mark.asyncio
    async def test_multibyte_password_cut_mid_character(self, hasher):
        password = "ç" * 50  # 100 bytes in UTF-8
        hashed = await hasher.hash(password)

        assert await hasher.compare(password, hashed) is True


class TestTokenService:
    """Tests for TokenService."""

    @pytest.fixture
    def tokens(self):
        return TokenService(secret="unit-secret")

    def test_issue_and_verify(self, tokens):
        token = tokens.issue(42, "ada@example.com")
        claims = tokens.verify(token)

        assert isinstance(claims, TokenClaims)
        assert claims.sub == 42
        assert claims.email == "ada@example.com"

    def test_one_hour_lifetime(self, tokens):
        issued_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        token = tokens.issue(1, "a@example.com", issued_at=issued_at)
        payload = jwt.get_unverified_claims(token)

        assert payload["exp"] - payload["iat"] == 3600
        assert payload["sub"] == "1"

    def test_expired_token_rejected(self, tokens):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=1, minutes=1)
        token = tokens.issue(1, "a@example.com", issued_at=issued_at)

        with pytest.raises(InvalidTokenError, match="expired"):
            tokens.verify(token)

    def test_token_within_lifetime_accepted(self, tokens):
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=59)
        token = tokens.issue(7, "a@example.com", issued_at=issued_at)

        assert tokens.verify(token).sub == 7

    def test_wrong_secret_rejected(self, tokens):
        token = TokenService(secret="other-secret").issue(1, "a@example.com")

        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_malformed_token_rejected(self, tokens):
        with pytest.raises(InvalidTokenError):
            tokens.verify("not-a-jwt")

    def test_non_numeric_subject_rejected(self, tokens):
        token = jwt.encode(
            {"sub": "admin", "email": "a@example.com"},
            "unit-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="claims"):
            tokens.verify(token)

    def test_missing_email_rejected(self, tokens):
        token = jwt.encode({"sub": "1"}, "unit-secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret="")
