from datetime import datetime

from pydantic import Field

from app.schemas.common import APIModel


class LabelCreate(APIModel):
    name: str = Field(min_length=1, max_length=50)


class LabelOut(APIModel):
    id: str
    org_id: str
    name: str
    created_at: datetime


class LabelEnvelope(APIModel):
    label: LabelOut


class LabelListOut(APIModel):
    labels: list[LabelOut]


class TaskLabelsIn(APIModel):
    label_ids: list[str] = Field(max_length=20)


class TaskLabelsOut(APIModel):
    ok: bool = True
    task_id: str
    label_ids: list[str]
