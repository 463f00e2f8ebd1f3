from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ValidationError
from app.dependencies.auth import get_current_user
from app.models.task import DEFAULT_PRIORITY, Task
from app.models.user import User
from app.schemas.task import TaskCreate, TaskEnvelope, TaskMove, TaskUpdate
from app.services.audit import log_audit
from app.services.boards import (
    get_project_column,
    get_project_for_member,
    get_task_for_member,
    resolve_task_column,
)
from app.services.orgs import get_membership

router = APIRouter(prefix="/api", tags=["tasks"], dependencies=[Depends(get_current_user)])

# Fields that can't be cleared once set.
_NON_NULLABLE_UPDATES = {"title", "priority"}


@router.post("/projects/{project_id}/tasks", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    project_id: str,
    payload: TaskCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project_for_member(db, project_id, user.id)
    column = resolve_task_column(db, project.id, payload.column_id)

    title = payload.title.strip()
    if not title:
        raise ValidationError("Title is required")

    priority = payload.priority or DEFAULT_PRIORITY
    task = Task(
        org_id=project.org_id,
        project_id=project.id,
        column_id=column.id,
        title=title,
        description=payload.description,
        priority=priority,
        due_date=payload.due_date,
    )
    db.add(task)
    db.flush()

    log_audit(
        db,
        org_id=project.org_id,
        project_id=project.id,
        actor_user_id=user.id,
        task_id=task.id,
        action="task.created",
        metadata={
            "title": title,
            "columnId": column.id,
            "priority": priority,
            "dueDate": payload.due_date.isoformat() if payload.due_date else None,
        },
    )

    db.commit()
    db.refresh(task)
    return {"task": task}


@router.patch("/tasks/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task = get_task_for_member(db, task_id, user.id)

    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError("No fields to update")

    for field in _NON_NULLABLE_UPDATES:
        if field in data and data[field] is None:
            raise ValidationError(f"{field} cannot be null")

    if "title" in data:
        data["title"] = data["title"].strip()
        if not data["title"]:
            raise ValidationError("Title is required")

    assignee_id = data.get("assignee_user_id")
    if assignee_id is not None and not get_membership(db, task.org_id, assignee_id):
        raise ValidationError("Assignee must be a member of this organization")

    for field, value in data.items():
        setattr(task, field, value)
    db.add(task)

    log_audit(
        db,
        org_id=task.org_id,
        project_id=task.project_id,
        actor_user_id=user.id,
        task_id=task.id,
        action="task.updated",
        metadata={"changedFields": sorted(payload.model_dump(exclude_unset=True, by_alias=True).keys())},
    )

    db.commit()
    db.refresh(task)
    return {"task": task}


@router.post("/tasks/{task_id}/move", response_model=TaskEnvelope)
def move_task(
    task_id: str,
    payload: TaskMove,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task = get_task_for_member(db, task_id, user.id)

    dest = get_project_column(db, task.project_id, payload.to_column_id)
    if not dest:
        raise ValidationError("Destination column is not in this project")

    from_column_id = task.column_id
    task.column_id = dest.id
    db.add(task)

    log_audit(
        db,
        org_id=task.org_id,
        project_id=task.project_id,
        actor_user_id=user.id,
        task_id=task.id,
        action="task.moved",
        metadata={"fromColumnId": from_column_id, "toColumnId": dest.id},
    )

    db.commit()
    db.refresh(task)
    return {"task": task}


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task = get_task_for_member(db, task_id, user.id)

    # task_id on the entry is nulled by the FK once the task row goes; keep it in metadata too.
    log_audit(
        db,
        org_id=task.org_id,
        project_id=task.project_id,
        actor_user_id=user.id,
        task_id=task.id,
        action="task.deleted",
        metadata={"taskId": task.id, "title": task.title},
    )

    db.delete(task)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
