from __future__ import annotations

import logging
from datetime import timedelta, timezone

from sqlalchemy.orm import Session

from app.core.base import utcnow
from app.core.config import settings
from app.core.errors import AuthorizationError, ValidationError
from app.core.security import generate_secret, hash_secret
from app.models.invite import Invite
from app.models.membership import ROLE_MEMBER, Membership
from app.models.user import User
from app.services.orgs import get_membership
from app.services.users import normalize_email

logger = logging.getLogger(__name__)


def hash_invite_token(raw_token: str) -> str:
    return hash_secret(raw_token)


def invite_link(raw_token: str) -> str:
    return f"{settings.WEB_ORIGIN}/accept-invite?token={raw_token}"


def create_invite(db: Session, *, org_id: str, email: str) -> tuple[Invite, str]:
    """
    Returns the stored invite and the raw token. The raw token is only ever
    handed back to the inviting admin (to share as a link).
    """
    raw = generate_secret(32)
    invite = Invite(
        org_id=org_id,
        email=normalize_email(email),
        token_hash=hash_invite_token(raw),
        expires_at=utcnow() + timedelta(days=settings.INVITE_EXPIRE_DAYS),
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)

    logger.info("Created invite: org_id=%s invite_id=%s", org_id, invite.id)
    return invite, raw


def accept_invite(db: Session, *, raw_token: str, user: User) -> str:
    """
    Join the invite's org as MEMBER (no-op if already a member). Returns org id.
    """
    invite = db.query(Invite).filter(Invite.token_hash == hash_invite_token(raw_token)).first()
    if not invite:
        raise ValidationError("Invalid invite token")

    if invite.accepted_at is not None:
        raise ValidationError("Invite already used")

    expires_at = invite.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= utcnow():
        raise ValidationError("Invite expired")

    if normalize_email(user.email) != normalize_email(invite.email):
        raise AuthorizationError("This invite was sent to a different email")

    if not get_membership(db, invite.org_id, user.id):
        db.add(Membership(org_id=invite.org_id, user_id=user.id, role=ROLE_MEMBER))

    invite.accepted_at = utcnow()
    db.add(invite)
    db.commit()

    logger.info("Invite accepted: org_id=%s invite_id=%s user_id=%s", invite.org_id, invite.id, user.id)
    return invite.org_id
