"""
Security primitives for Contactbook.

- Password hashing (bcrypt, salted, configurable work factor)
- Access token issuance and verification (JWT, HS256)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from loguru import logger
from starlette.concurrency import run_in_threadpool


DEFAULT_BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


class InvalidTokenError(Exception):
    """Token is malformed, tampered with, expired or carries bad claims."""


# =============================================================================
# Credential Hasher
# =============================================================================

class PasswordHasher:
    """
    Salted bcrypt hashing.

    Hashing is CPU bound, so both operations run in the threadpool and
    only yield back to the event loop once the digest is ready.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        # bcrypt only reads the first 72 bytes; newer releases raise past that
        return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def _hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(plaintext), salt).decode("utf-8")

    def _compare(self, plaintext: str, hashed: str) -> bool:
        return bcrypt.checkpw(self._encode(plaintext), hashed.encode("utf-8"))

    async def hash(self, plaintext: str) -> str:
        """Hash a plaintext password."""
        return await run_in_threadpool(self._hash, plaintext)

    async def compare(self, plaintext: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash."""
        return await run_in_threadpool(self._compare, plaintext, hashed)


# =============================================================================
# Token Service
# =============================================================================

@dataclass
class TokenClaims:
    """Decoded access token claims."""

    sub: int
    email: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens.

    Tokens are stateless: there is no server-side record and no revocation.

    Usage:
        tokens = TokenService(secret="change-me")
        token = tokens.issue(42, "ada@example.com")
        claims = tokens.verify(token)   # TokenClaims(sub=42, ...)
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = ALGORITHM,
        expires_in: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(
        self,
        subject_id: int,
        email: str,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            subject_id: User id, stored in the ``sub`` claim
            email: User email, stored in the ``email`` claim
            issued_at: Issuance instant (defaults to now, UTC)

        Returns:
            Encoded JWT string
        """
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            # JWT subjects must be strings
            "sub": str(subject_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expires_in).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry, then decode the claims.

        Raises:
            InvalidTokenError: If the token cannot be trusted.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError("Invalid token") from e

        sub = payload.get("sub")
        email = payload.get("email")
        if not isinstance(sub, str) or not sub.isdigit() or not isinstance(email, str):
            raise InvalidTokenError("Invalid token claims")

        return TokenClaims(
            sub=int(sub),
            email=email,
            issued_at=_from_timestamp(payload.get("iat")),
            expires_at=_from_timestamp(payload.get("exp")),
        )


def _from_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)
