from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.orgs import require_org_admin
from app.models.membership import Membership
from app.models.user import User
from app.schemas.invite import InviteAcceptedOut, InviteAcceptIn, InviteCreate, InviteEnvelope
from app.services.invites import accept_invite, create_invite, invite_link

router = APIRouter(prefix="/api", tags=["invites"], dependencies=[Depends(get_current_user)])


@router.post("/orgs/{org_id}/invites", response_model=InviteEnvelope, status_code=status.HTTP_201_CREATED)
def create_org_invite(
    org_id: str,
    payload: InviteCreate,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_admin),
):
    invite, raw = create_invite(db, org_id=org_id, email=payload.email)

    # No outbound email yet: the admin shares the link themselves.
    return {
        "invite": {
            "email": invite.email,
            "expires_at": invite.expires_at,
            "invite_link": invite_link(raw),
            "token": raw,
        }
    }


@router.post("/invites/accept", response_model=InviteAcceptedOut)
def accept(
    payload: InviteAcceptIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    org_id = accept_invite(db, raw_token=payload.token.strip(), user=user)
    return {"ok": True, "org_id": org_id}
