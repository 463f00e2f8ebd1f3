from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.models.audit_log import AuditLog
from app.models.user import User
from app.schemas.audit import AuditEntryOut, AuditListOut
from app.services.boards import get_project_for_member

router = APIRouter(prefix="/api/projects", tags=["audit"], dependencies=[Depends(get_current_user)])

AUDIT_PAGE_SIZE = 200


@router.get("/{project_id}/audit", response_model=AuditListOut)
def list_project_audit(
    project_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_project_for_member(db, project_id, user.id)

    rows = (
        db.query(AuditLog)
        .options(joinedload(AuditLog.actor))
        .filter(AuditLog.project_id == project_id)
        .order_by(AuditLog.created_at.desc())
        .limit(AUDIT_PAGE_SIZE)
        .all()
    )

    # Built by hand: `metadata` on the ORM class is SQLAlchemy's MetaData, not the column.
    return {
        "audit": [
            AuditEntryOut(
                id=a.id,
                action=a.action,
                metadata=a.details or {},
                created_at=a.created_at,
                task_id=a.task_id,
                actor_user_id=a.actor_user_id,
                actor_email=a.actor_email,
            )
            for a in rows
        ]
    }
