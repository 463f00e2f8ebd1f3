from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ConflictError, ValidationError
from app.dependencies.auth import get_current_user
from app.dependencies.orgs import require_org_member
from app.models.label import Label
from app.models.membership import Membership
from app.models.task_label import TaskLabel
from app.models.user import User
from app.schemas.label import LabelCreate, LabelEnvelope, LabelListOut, TaskLabelsIn, TaskLabelsOut
from app.services.audit import log_audit
from app.services.boards import get_task_for_member

router = APIRouter(prefix="/api", tags=["labels"], dependencies=[Depends(get_current_user)])


@router.post("/orgs/{org_id}/labels", response_model=LabelEnvelope, status_code=status.HTTP_201_CREATED)
def create_label(
    org_id: str,
    payload: LabelCreate,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_member),
):
    name = payload.name.strip()
    if not name:
        raise ValidationError("Name is required")

    exists = db.query(Label.id).filter(Label.org_id == org_id, Label.name == name).first()
    if exists:
        raise ConflictError("A label with that name already exists")

    label = Label(org_id=org_id, name=name)
    db.add(label)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A label with that name already exists")
    db.refresh(label)
    return {"label": label}


@router.get("/orgs/{org_id}/labels", response_model=LabelListOut)
def list_labels(
    org_id: str,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_member),
):
    labels = db.query(Label).filter(Label.org_id == org_id).order_by(Label.name.asc()).all()
    return {"labels": labels}


@router.put("/tasks/{task_id}/labels", response_model=TaskLabelsOut)
def set_task_labels(
    task_id: str,
    payload: TaskLabelsIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Replace semantics: the task ends up with exactly `labelIds`.
    """
    task = get_task_for_member(db, task_id, user.id)

    # de-dupe while preserving order
    label_ids = list(dict.fromkeys(payload.label_ids))

    if label_ids:
        valid = db.query(Label.id).filter(Label.org_id == task.org_id, Label.id.in_(label_ids)).count()
        if valid != len(label_ids):
            raise ValidationError("One or more labels are invalid for this organization")

    desired = set(label_ids)
    existing = {r.label_id: r for r in task.label_rows}

    for label_id, row in existing.items():
        if label_id not in desired:
            task.label_rows.remove(row)
    for label_id in label_ids:
        if label_id not in existing:
            task.label_rows.append(TaskLabel(task_id=task.id, label_id=label_id))

    log_audit(
        db,
        org_id=task.org_id,
        project_id=task.project_id,
        actor_user_id=user.id,
        task_id=task.id,
        action="task.labels_set",
        metadata={"labelIds": label_ids},
    )

    db.commit()
    return {"ok": True, "task_id": task.id, "label_ids": label_ids}
