# app/dependencies/auth.py
from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthenticationError, InvalidToken
from app.core.security import AccessTokenIssuer
from app.models.user import User
from app.services.refresh_tokens import RefreshTokenService

bearer_scheme = HTTPBearer(auto_error=False)


class Unauthenticated(AuthenticationError):
    """401 that also tells the client which scheme to use."""

    headers = {"WWW-Authenticate": "Bearer"}


def get_access_tokens(request: Request) -> AccessTokenIssuer:
    return request.app.state.access_tokens


def get_refresh_tokens(request: Request) -> RefreshTokenService:
    return request.app.state.refresh_tokens


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: AccessTokenIssuer = Depends(get_access_tokens),
    db: Session = Depends(get_db),
) -> User:
    """
    Validates:
      - Authorization: Bearer <token>
      - token signature + exp
      - user still exists
    Attaches the user id to request.state and returns the User row.
    """
    if not creds or creds.scheme.lower() != "bearer":
        raise Unauthenticated("Missing Authorization header")

    try:
        user_id = issuer.verify(creds.credentials)
    except InvalidToken:
        raise Unauthenticated("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise Unauthenticated("User not found")

    request.state.user_id = user.id
    return user
