from datetime import datetime
from typing import Any, Dict, Optional

from app.schemas.common import APIModel


class AuditEntryOut(APIModel):
    id: str
    action: str
    metadata: Dict[str, Any]
    created_at: datetime
    task_id: Optional[str] = None
    actor_user_id: str
    actor_email: Optional[str] = None


class AuditListOut(APIModel):
    audit: list[AuditEntryOut]
