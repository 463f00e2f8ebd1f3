# app/services/users.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.core.security import hash_password
from app.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, *, email: str, password: str) -> User:
    """
    Create a password-backed user.

    Raises:
        ConflictError: if the email is already registered
    """
    normalized_email = normalize_email(email)
    if get_user_by_email(db, normalized_email):
        raise ConflictError("Email already in use")

    user = User(email=normalized_email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same address.
        db.rollback()
        raise ConflictError("Email already in use")
    db.refresh(user)

    logger.info("Created user: id=%s email=%s", user.id, normalized_email)
    return user
