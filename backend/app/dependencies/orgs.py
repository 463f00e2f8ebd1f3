from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthorizationError
from app.dependencies.auth import get_current_user
from app.models.membership import ROLE_ADMIN, Membership
from app.models.user import User
from app.services.orgs import get_membership, require_membership


def require_org_member(
    org_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Membership:
    return require_membership(db, org_id, user.id)


def require_org_admin(
    org_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Membership:
    membership = get_membership(db, org_id, user.id)
    if not membership:
        raise AuthorizationError("Not a member of this org")
    if membership.role != ROLE_ADMIN:
        raise AuthorizationError("Admin privileges required")
    return membership
