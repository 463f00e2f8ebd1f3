from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Response

from app.core.errors import ExpiredToken, InvalidToken, MissingToken, RevokedToken
from app.models.refresh_token import RefreshToken
from app.services.refresh_tokens import RefreshTokenConfig, RefreshTokenService

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
CONFIG = RefreshTokenConfig(hash_key="unit_test_hash_key", ttl=timedelta(days=14))


def _service_at(when: datetime) -> RefreshTokenService:
    return RefreshTokenService(CONFIG, clock=lambda: when)


def test_issue_stores_only_hash(db_session, users):
    svc = _service_at(T0)
    raw = svc.issue(db_session, users[0].id)

    rows = db_session.query(RefreshToken).all()
    assert len(rows) == 1
    assert rows[0].token_hash != raw
    assert rows[0].token_hash == svc.hash(raw)
    assert rows[0].revoked_at is None


def test_hash_is_keyed():
    other = RefreshTokenService(RefreshTokenConfig(hash_key="different"))
    assert _service_at(T0).hash("abc") != other.hash("abc")


def test_rotate_revokes_old_and_issues_new(db_session, users):
    svc = _service_at(T0)
    raw = svc.issue(db_session, users[0].id)

    rotated = svc.rotate(db_session, raw)

    assert rotated.user_id == users[0].id
    assert rotated.refresh_token != raw
    assert rotated.expires_at == T0 + timedelta(days=14)

    old = db_session.query(RefreshToken).filter(RefreshToken.token_hash == svc.hash(raw)).one()
    new = db_session.query(RefreshToken).filter(RefreshToken.token_hash == svc.hash(rotated.refresh_token)).one()
    assert old.revoked_at is not None
    assert new.revoked_at is None


def test_rotate_twice_with_same_token_is_revoked(db_session, users):
    svc = _service_at(T0)
    raw = svc.issue(db_session, users[0].id)
    svc.rotate(db_session, raw)

    with pytest.raises(RevokedToken):
        svc.rotate(db_session, raw)


def test_rotate_missing_token():
    with pytest.raises(MissingToken):
        _service_at(T0).rotate(None, "")


def test_rotate_unknown_token(db_session):
    with pytest.raises(InvalidToken):
        _service_at(T0).rotate(db_session, "never-issued")


def test_rotate_just_before_expiry_succeeds(db_session, users):
    raw = _service_at(T0).issue(db_session, users[0].id)
    later = _service_at(T0 + timedelta(days=14) - timedelta(seconds=1))
    assert later.rotate(db_session, raw).user_id == users[0].id


def test_rotate_at_expiry_fails(db_session, users):
    raw = _service_at(T0).issue(db_session, users[0].id)
    with pytest.raises(ExpiredToken):
        _service_at(T0 + timedelta(days=14)).rotate(db_session, raw)


def test_concurrent_redeemer_loses(db_session, users):
    svc = _service_at(T0)
    raw = svc.issue(db_session, users[0].id)

    # Load the row, then let "another request" revoke it behind the session's back.
    stale = db_session.query(RefreshToken).filter(RefreshToken.token_hash == svc.hash(raw)).one()
    assert stale.revoked_at is None
    db_session.query(RefreshToken).filter(RefreshToken.id == stale.id).update(
        {RefreshToken.revoked_at: T0}, synchronize_session=False
    )

    with pytest.raises(RevokedToken):
        svc.rotate(db_session, raw)

    # No replacement was issued.
    assert db_session.query(RefreshToken).count() == 1


def test_revoke_is_idempotent(db_session, users):
    svc = _service_at(T0)
    raw = svc.issue(db_session, users[0].id)

    assert svc.revoke(db_session, raw) is True
    assert svc.revoke(db_session, raw) is False
    assert svc.revoke(db_session, None) is False

    with pytest.raises(RevokedToken):
        svc.rotate(db_session, raw)


def test_revoke_unknown_token_is_noop(db_session):
    assert _service_at(T0).revoke(db_session, "never-issued") is False


def test_config_from_settings_falls_back_to_jwt_secret():
    class _Settings:
        REFRESH_TOKEN_HASH_SECRET = ""
        JWT_SECRET = "jwt_secret"
        REFRESH_COOKIE_SAMESITE = "bogus"
        REFRESH_TOKEN_EXPIRE_DAYS = 3
        REFRESH_COOKIE_NAME = "rt"
        REFRESH_COOKIE_PATH = "/api/auth"
        REFRESH_COOKIE_DOMAIN = None
        is_prod = False

    cfg = RefreshTokenConfig.from_settings(_Settings())
    assert cfg.hash_key == "jwt_secret"
    assert cfg.ttl == timedelta(days=3)
    assert cfg.cookie_samesite == "lax"
    assert cfg.cookie_secure is False
    assert cfg.cookie_path == "/api/auth"
    assert cfg.cookie_name == "rt"


def _prod_config() -> RefreshTokenConfig:
    class _Settings:
        REFRESH_TOKEN_HASH_SECRET = "hash_secret"
        JWT_SECRET = "jwt_secret"
        REFRESH_COOKIE_SAMESITE = "none"
        REFRESH_TOKEN_EXPIRE_DAYS = 14
        REFRESH_COOKIE_NAME = "refresh_token"
        REFRESH_COOKIE_PATH = "/api/auth/refresh"
        REFRESH_COOKIE_DOMAIN = None
        is_prod = True

    return RefreshTokenConfig.from_settings(_Settings())


def test_prod_cookie_is_secure_and_cross_site():
    svc = RefreshTokenService(_prod_config())
    resp = Response()
    svc.set_cookie(resp, "abc")

    parts = [p.strip() for p in resp.headers["set-cookie"].split(";")]
    assert parts[0] == "refresh_token=abc"
    assert "HttpOnly" in parts
    assert "Secure" in parts
    assert "SameSite=none" in parts
    assert "Path=/api/auth/refresh" in parts
    assert "Max-Age=1209600" in parts


def test_prod_cookie_clear_keeps_same_attributes():
    svc = RefreshTokenService(_prod_config())
    resp = Response()
    svc.clear_cookie(resp)

    parts = [p.strip() for p in resp.headers["set-cookie"].split(";")]
    assert parts[0] in ('refresh_token=""', "refresh_token=")
    assert "Secure" in parts
    assert "SameSite=none" in parts
    assert "Path=/api/auth/refresh" in parts
    assert "Max-Age=0" in parts
