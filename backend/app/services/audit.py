from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog


def log_audit(
    db: Session,
    *,
    org_id: str,
    project_id: str,
    actor_user_id: str,
    action: str,
    task_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    entry = AuditLog(
        org_id=org_id,
        project_id=project_id,
        task_id=task_id,
        actor_user_id=actor_user_id,
        action=action,
        details=metadata or {},
    )
    db.add(entry)
    # Let caller decide commit timing so the entry lands with the change it describes.
    db.flush()
    return entry
