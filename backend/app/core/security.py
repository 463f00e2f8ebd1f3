# app/core/security.py
from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.base import utcnow
from app.core.config import Settings
from app.core.errors import InvalidToken

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

Clock = Callable[[], datetime]


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


# -------------------------
# Opaque secrets (refresh tokens, invites)
# -------------------------
def generate_secret(nbytes: int = 48) -> str:
    """
    High-entropy URL-safe secret. The raw value is handed to the client once;
    only its hash is persisted.
    """
    return secrets.token_urlsafe(nbytes)


def hash_secret(raw: str, key: str | None = None) -> str:
    """
    One-way hash for DB storage. Keyed (HMAC-SHA256) when a key is given so a
    leaked table can't be brute-forced offline without the key as well.
    """
    data = raw.encode("utf-8")
    if key:
        return hmac.new(key.encode("utf-8"), data, hashlib.sha256).hexdigest()
    return hashlib.sha256(data).hexdigest()


# -------------------------
# Access tokens (JWT)
# -------------------------
@dataclass(frozen=True)
class AccessTokenConfig:
    secret: str
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(minutes=15)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccessTokenConfig":
        if not settings.JWT_SECRET or not settings.JWT_SECRET.strip():
            raise RuntimeError("JWT_SECRET must be set (auth is required).")
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )


class AccessTokenIssuer:
    """
    Mints and verifies short-lived bearer tokens: Authorization: Bearer <token>.

    No server-side state: anything holding the same config can verify.
    """

    purpose = "access"

    def __init__(self, config: AccessTokenConfig, clock: Clock = utcnow) -> None:
        self.config = config
        self._clock = clock

    def issue(self, user_id: str) -> str:
        now = self._clock()
        exp = now + self.config.ttl
        payload = {
            "sub": str(user_id),
            "typ": self.purpose,
            "iat": int(now.timestamp()),
            # NumericDate may be fractional; keeps expiry exactly at issue time + ttl.
            "exp": exp.timestamp(),
        }
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)

    def verify(self, token: str) -> str:
        """
        Returns the user id embedded in `token`.

        Raises InvalidToken for anything malformed, badly signed, of the wrong
        type or at/after its expiry.
        """
        try:
            # Expiry is checked below against our own clock.
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise InvalidToken("Invalid or expired token")

        if payload.get("typ") != self.purpose:
            raise InvalidToken("Invalid or expired token")

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or self._clock().timestamp() >= exp:
            raise InvalidToken("Invalid or expired token")

        sub = str(payload.get("sub") or "").strip()
        if not sub:
            raise InvalidToken("Invalid or expired token")
        return sub
