from datetime import datetime

from pydantic import EmailStr, Field

from app.schemas.common import APIModel


class InviteCreate(APIModel):
    email: EmailStr


class InviteOut(APIModel):
    email: str
    expires_at: datetime
    invite_link: str
    token: str


class InviteEnvelope(APIModel):
    invite: InviteOut


class InviteAcceptIn(APIModel):
    token: str = Field(min_length=10, max_length=200)


class InviteAcceptedOut(APIModel):
    ok: bool = True
    org_id: str
