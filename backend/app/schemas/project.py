from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.common import APIModel
from app.schemas.task import TaskOut


class ProjectCreate(APIModel):
    name: str = Field(min_length=1, max_length=200)


class ProjectOut(APIModel):
    id: str
    org_id: str
    name: str
    created_at: datetime


class ProjectEnvelope(APIModel):
    project: ProjectOut


class ProjectListOut(APIModel):
    projects: list[ProjectOut]


class BoardColumnOut(APIModel):
    id: str
    name: str
    position: int
    tasks: list[TaskOut] = []


class BoardOut(APIModel):
    columns: list[BoardColumnOut]
