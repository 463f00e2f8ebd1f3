from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.membership import ORG_ROLES
from app.schemas.common import APIModel

OrgRole = Literal[ORG_ROLES]


class OrganizationCreate(APIModel):
    name: str = Field(min_length=1, max_length=200)


class OrganizationOut(APIModel):
    id: str
    name: str


class OrganizationEnvelope(APIModel):
    organization: OrganizationOut


class OrganizationWithRoleOut(OrganizationOut):
    role: OrgRole


class OrganizationListOut(APIModel):
    organizations: list[OrganizationWithRoleOut]


class OrgMeOut(APIModel):
    org_id: str
    membership_id: str
    role: OrgRole


class MemberOut(APIModel):
    membership_id: str
    role: OrgRole
    joined_at: datetime
    user_id: str
    email: str


class MemberListOut(APIModel):
    members: list[MemberOut]


class MemberRoleUpdate(APIModel):
    role: OrgRole


class MembershipOut(APIModel):
    membership_id: str
    org_id: str
    user_id: str
    role: OrgRole


class MembershipEnvelope(APIModel):
    member: MembershipOut
