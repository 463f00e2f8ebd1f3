from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Request, Response
from sqlalchemy.orm import Session

from app.core.base import utcnow
from app.core.config import Settings
from app.core.errors import ExpiredToken, InvalidToken, MissingToken, RevokedToken
from app.core.security import Clock, generate_secret, hash_secret
from app.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


# -----------------------------
# Refresh token settings
# -----------------------------
@dataclass(frozen=True)
class RefreshTokenConfig:
    hash_key: str
    ttl: timedelta = timedelta(days=14)
    cookie_name: str = "refresh_token"
    # Keep the refresh cookie scoped to the refresh endpoint by default
    cookie_path: str = "/api/auth/refresh"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    cookie_domain: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "RefreshTokenConfig":
        hash_key = settings.REFRESH_TOKEN_HASH_SECRET or settings.JWT_SECRET
        if not hash_key:
            raise RuntimeError("JWT_SECRET must be set to hash refresh tokens.")

        samesite = str(settings.REFRESH_COOKIE_SAMESITE or "").lower().strip()
        if samesite not in {"lax", "strict", "none"}:
            samesite = "none" if settings.is_prod else "lax"

        return cls(
            hash_key=hash_key,
            ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
            cookie_name=str(settings.REFRESH_COOKIE_NAME).strip() or "refresh_token",
            cookie_path=str(settings.REFRESH_COOKIE_PATH).strip() or "/api/auth/refresh",
            # Prod => HTTPS => Secure cookies. Dev http://localhost => must be False.
            cookie_secure=settings.is_prod,
            cookie_samesite=samesite,
            cookie_domain=settings.REFRESH_COOKIE_DOMAIN,
        )


@dataclass(frozen=True)
class RotatedSession:
    user_id: str
    refresh_token: str
    expires_at: datetime


def _as_aware(dt: datetime) -> datetime:
    # SQLite round-trips tz-aware datetimes as naive; everything we write is UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class RefreshTokenService:
    """
    Long-lived session credential, delivered only as an HttpOnly cookie.

    Each row moves one way: issued -> revoked | expired. Rotation revokes the
    presented token and issues its replacement in one transaction, so a raw
    token can be redeemed at most once.
    """

    def __init__(self, config: RefreshTokenConfig, clock: Clock = utcnow) -> None:
        self.config = config
        self._clock = clock

    def hash(self, raw_token: str) -> str:
        return hash_secret(raw_token, self.config.hash_key)

    def _add(self, db: Session, user_id: str) -> tuple[str, RefreshToken]:
        raw = generate_secret(48)
        now = self._clock()
        rt = RefreshToken(
            user_id=user_id,
            token_hash=self.hash(raw),
            created_at=now,
            expires_at=now + self.config.ttl,
            revoked_at=None,
        )
        db.add(rt)
        db.flush()
        return raw, rt

    def issue(self, db: Session, user_id: str) -> str:
        """
        Creates a new refresh token for user, stores hash in DB, returns raw token.
        """
        raw, _ = self._add(db, user_id)
        db.commit()
        return raw

    def rotate(self, db: Session, raw_token: str | None) -> RotatedSession:
        if not raw_token:
            raise MissingToken()

        rt = db.query(RefreshToken).filter(RefreshToken.token_hash == self.hash(raw_token)).first()
        if not rt:
            raise InvalidToken()

        if rt.revoked_at is not None:
            logger.warning("Revoked refresh token presented: token_id=%s user_id=%s", rt.id, rt.user_id)
            raise RevokedToken()

        now = self._clock()
        if _as_aware(rt.expires_at) <= now:
            raise ExpiredToken()

        # Check-and-set: only one concurrent redeemer can flip revoked_at.
        revoked = (
            db.query(RefreshToken)
            .filter(RefreshToken.id == rt.id, RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: now}, synchronize_session=False)
        )
        if revoked != 1:
            logger.warning("Refresh token redeemed concurrently: token_id=%s user_id=%s", rt.id, rt.user_id)
            db.rollback()
            raise RevokedToken()

        user_id = rt.user_id
        try:
            raw, new_rt = self._add(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise

        return RotatedSession(user_id=user_id, refresh_token=raw, expires_at=_as_aware(new_rt.expires_at))

    def revoke(self, db: Session, raw_token: str | None) -> bool:
        """
        Revoke the token if it is known and still live. Safe to call repeatedly.
        """
        if not raw_token:
            return False
        revoked = (
            db.query(RefreshToken)
            .filter(RefreshToken.token_hash == self.hash(raw_token), RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: self._clock()}, synchronize_session=False)
        )
        db.commit()
        return bool(revoked)

    # -----------------------------
    # Cookie helpers
    # -----------------------------
    def set_cookie(self, resp: Response, raw_token: str) -> None:
        resp.set_cookie(
            key=self.config.cookie_name,
            value=raw_token,
            httponly=True,
            secure=self.config.cookie_secure,
            samesite=self.config.cookie_samesite,
            max_age=int(self.config.ttl.total_seconds()),
            path=self.config.cookie_path,
            domain=self.config.cookie_domain,
        )

    def clear_cookie(self, resp: Response) -> None:
        resp.delete_cookie(
            key=self.config.cookie_name,
            path=self.config.cookie_path,
            domain=self.config.cookie_domain,
            secure=self.config.cookie_secure,
            httponly=True,
            samesite=self.config.cookie_samesite,
        )

    def read_cookie(self, req: Request) -> str | None:
        val = req.cookies.get(self.config.cookie_name)
        if not val:
            return None
        val = val.strip()
        return val or None
