from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from app.models.task import TASK_PRIORITIES
from app.schemas.common import APIModel

TaskPriority = Literal[TASK_PRIORITIES]


class TaskCreate(APIModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    column_id: Optional[str] = None


class TaskUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assignee_user_id: Optional[str] = None


class TaskMove(APIModel):
    to_column_id: str = Field(min_length=1)


class TaskOut(APIModel):
    id: str
    org_id: str
    project_id: str
    column_id: str
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    due_date: Optional[datetime] = None
    assignee_user_id: Optional[str] = None
    label_ids: list[str] = []
    created_at: datetime
    updated_at: datetime


class TaskEnvelope(APIModel):
    task: TaskOut
