from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ValidationError
from app.dependencies.auth import get_current_user
from app.dependencies.orgs import require_org_admin, require_org_member
from app.models.membership import Membership
from app.models.user import User
from app.schemas.organization import (
    MemberListOut,
    MemberRoleUpdate,
    MembershipEnvelope,
    OrganizationCreate,
    OrganizationEnvelope,
    OrganizationListOut,
    OrgMeOut,
)
from app.services.orgs import (
    change_member_role,
    create_organization,
    list_user_organizations,
    remove_member,
    require_membership,
)

router = APIRouter(prefix="/api/orgs", tags=["orgs"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=OrganizationEnvelope, status_code=status.HTTP_201_CREATED)
def create_org(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    name = payload.name.strip()
    if not name:
        raise ValidationError("Name is required")

    org = create_organization(db, name=name, creator_id=user.id)
    return {"organization": org}


@router.get("", response_model=OrganizationListOut)
def list_orgs(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    rows = list_user_organizations(db, user.id)
    return {"organizations": [{"id": org.id, "name": org.name, "role": m.role} for org, m in rows]}


@router.get("/{org_id}/me", response_model=OrgMeOut)
def get_my_membership(
    org_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    membership = require_membership(db, org_id, user.id)
    return {"org_id": org_id, "membership_id": membership.id, "role": membership.role}


@router.get("/{org_id}/members", response_model=MemberListOut)
def list_members(
    org_id: str,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_member),
):
    rows = (
        db.query(Membership, User)
        .join(User, User.id == Membership.user_id)
        .filter(Membership.org_id == org_id)
        .order_by(Membership.created_at.asc())
        .all()
    )
    return {
        "members": [
            {
                "membership_id": m.id,
                "role": m.role,
                "joined_at": m.created_at,
                "user_id": u.id,
                "email": u.email,
            }
            for m, u in rows
        ]
    }


@router.patch("/{org_id}/members/{member_id}", response_model=MembershipEnvelope)
def update_member_role(
    org_id: str,
    member_id: str,
    payload: MemberRoleUpdate,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_admin),
):
    member = change_member_role(db, org_id=org_id, member_id=member_id, role=payload.role)
    return {
        "member": {
            "membership_id": member.id,
            "org_id": member.org_id,
            "user_id": member.user_id,
            "role": member.role,
        }
    }


@router.delete("/{org_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    org_id: str,
    member_id: str,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_admin),
):
    remove_member(db, org_id=org_id, member_id=member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
