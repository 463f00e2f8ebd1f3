from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import APIModel


class CommentCreate(APIModel):
    body: str = Field(min_length=1, max_length=5000)


class CommentOut(APIModel):
    id: str
    task_id: str
    author_user_id: str
    author_email: Optional[str] = None
    body: str
    created_at: datetime


class CommentEnvelope(APIModel):
    comment: CommentOut


class CommentListOut(APIModel):
    comments: list[CommentOut]
