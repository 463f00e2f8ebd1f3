from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.membership import ROLE_ADMIN, ROLE_MEMBER, Membership
from app.models.organization import Organization

logger = logging.getLogger(__name__)


def get_membership(db: Session, org_id: str, user_id: str) -> Membership | None:
    return (
        db.query(Membership)
        .filter(Membership.org_id == org_id, Membership.user_id == user_id)
        .first()
    )


def require_membership(db: Session, org_id: str, user_id: str) -> Membership:
    membership = get_membership(db, org_id, user_id)
    if not membership:
        raise AuthorizationError("You are not a member of this organization")
    return membership


def create_organization(db: Session, *, name: str, creator_id: str) -> Organization:
    """
    Create an organization; the creator becomes its first ADMIN.
    """
    org = Organization(name=name)
    db.add(org)
    db.flush()

    db.add(Membership(org_id=org.id, user_id=creator_id, role=ROLE_ADMIN))
    db.commit()
    db.refresh(org)

    logger.info("Created organization: id=%s creator=%s", org.id, creator_id)
    return org


def list_user_organizations(db: Session, user_id: str) -> list[tuple[Organization, Membership]]:
    return (
        db.query(Organization, Membership)
        .join(Membership, Membership.org_id == Organization.id)
        .filter(Membership.user_id == user_id)
        .order_by(Organization.created_at.asc())
        .all()
    )


def _count_admins(db: Session, org_id: str) -> int:
    return int(
        db.query(func.count(Membership.id))
        .filter(Membership.org_id == org_id, Membership.role == ROLE_ADMIN)
        .scalar()
        or 0
    )


def _get_member(db: Session, org_id: str, member_id: str) -> Membership:
    member = (
        db.query(Membership)
        .filter(Membership.id == member_id, Membership.org_id == org_id)
        .first()
    )
    if not member:
        raise NotFoundError("Member not found")
    return member


def change_member_role(db: Session, *, org_id: str, member_id: str, role: str) -> Membership:
    member = _get_member(db, org_id, member_id)

    # An org always keeps at least one admin.
    if role == ROLE_MEMBER and member.role == ROLE_ADMIN and _count_admins(db, org_id) <= 1:
        raise ValidationError("Cannot demote the last admin")

    member.role = role
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def remove_member(db: Session, *, org_id: str, member_id: str) -> None:
    member = _get_member(db, org_id, member_id)

    if member.role == ROLE_ADMIN and _count_admins(db, org_id) <= 1:
        raise ValidationError("Cannot remove the last admin")

    db.delete(member)
    db.commit()
    logger.info("Removed member: org_id=%s membership_id=%s", org_id, member_id)
