from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.models.comment import Comment
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentEnvelope, CommentListOut
from app.services.audit import log_audit
from app.services.boards import get_task_for_member

router = APIRouter(prefix="/api/tasks", tags=["comments"], dependencies=[Depends(get_current_user)])


@router.post("/{task_id}/comments", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
def add_comment(
    task_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    task = get_task_for_member(db, task_id, user.id)

    comment = Comment(org_id=task.org_id, task_id=task.id, author_user_id=user.id, body=payload.body)
    db.add(comment)
    db.flush()

    log_audit(
        db,
        org_id=task.org_id,
        project_id=task.project_id,
        actor_user_id=user.id,
        task_id=task.id,
        action="comment.added",
        metadata={"commentId": comment.id},
    )

    db.commit()
    db.refresh(comment)
    return {"comment": comment}


@router.get("/{task_id}/comments", response_model=CommentListOut)
def list_comments(
    task_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    get_task_for_member(db, task_id, user.id)

    comments = (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.task_id == task_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
    return {"comments": comments}
