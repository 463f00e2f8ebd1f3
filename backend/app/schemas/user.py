from __future__ import annotations

from datetime import datetime

from app.schemas.common import APIModel


class UserOut(APIModel):
    id: str
    email: str
    created_at: datetime | None = None


class MeOut(APIModel):
    user: UserOut
