# app/routes/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthenticationError
from app.core.password_policy import ensure_strong_password
from app.core.security import AccessTokenIssuer, verify_password
from app.dependencies.auth import get_access_tokens, get_current_user, get_refresh_tokens
from app.models.user import User
from app.schemas.auth import AccessTokenOut, AuthOut, LoginIn, SignupIn
from app.schemas.common import OkOut
from app.schemas.user import MeOut
from app.services.refresh_tokens import RefreshTokenService
from app.services.users import create_user, get_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupIn,
    db: Session = Depends(get_db),
    issuer: AccessTokenIssuer = Depends(get_access_tokens),
):
    ensure_strong_password(payload.password, email=payload.email)

    user = create_user(db, email=payload.email, password=payload.password)

    return {"user": user, "access_token": issuer.issue(user.id)}


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    response: Response,
    db: Session = Depends(get_db),
    issuer: AccessTokenIssuer = Depends(get_access_tokens),
    refresh_tokens: RefreshTokenService = Depends(get_refresh_tokens),
):
    user = get_user_by_email(db, payload.email)

    # Same message either way so the endpoint can't be used to probe for accounts.
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for email=%s", payload.email.strip().lower())
        raise AuthenticationError("Invalid email or password")

    # Issue refresh token + set HttpOnly cookie
    raw_refresh = refresh_tokens.issue(db, user.id)
    refresh_tokens.set_cookie(response, raw_refresh)

    logger.info("User logged in: id=%s", user.id)
    return {"user": user, "access_token": issuer.issue(user.id)}


@router.post("/refresh", response_model=AccessTokenOut)
def refresh(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    issuer: AccessTokenIssuer = Depends(get_access_tokens),
    refresh_tokens: RefreshTokenService = Depends(get_refresh_tokens),
):
    """
    Rotate refresh tokens via HttpOnly cookie:
      - read refresh token from cookie
      - validate + revoke old + issue new (one transaction)
      - set new refresh cookie
      - return new access token
    """
    rotated = refresh_tokens.rotate(db, refresh_tokens.read_cookie(request))

    # FK cascade removes tokens with their user; this only trips on a race with deletion.
    if not get_user(db, rotated.user_id):
        raise AuthenticationError("Invalid user")

    refresh_tokens.set_cookie(response, rotated.refresh_token)
    return {"access_token": issuer.issue(rotated.user_id)}


@router.post("/logout", response_model=OkOut)
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    refresh_tokens: RefreshTokenService = Depends(get_refresh_tokens),
):
    """
    Logout by revoking the refresh token in cookie (if present) and clearing cookie.
    """
    if refresh_tokens.revoke(db, refresh_tokens.read_cookie(request)):
        logger.info("Refresh token revoked on logout")

    refresh_tokens.clear_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=MeOut)
def me(user: User = Depends(get_current_user)):
    return {"user": user}
