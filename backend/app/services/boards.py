from __future__ import annotations

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models.board_column import DEFAULT_COLUMNS, BoardColumn
from app.models.project import Project
from app.models.task import Task
from app.services.audit import log_audit
from app.services.orgs import require_membership


def create_project(db: Session, *, org_id: str, name: str, actor_user_id: str) -> Project:
    """
    Create a project with the default Backlog / In Progress / Done columns.
    """
    project = Project(org_id=org_id, name=name)
    db.add(project)
    db.flush()

    for position, col_name in enumerate(DEFAULT_COLUMNS):
        db.add(BoardColumn(org_id=org_id, project_id=project.id, name=col_name, position=position))

    log_audit(
        db,
        org_id=org_id,
        project_id=project.id,
        actor_user_id=actor_user_id,
        action="project.created",
        metadata={"name": name},
    )

    db.commit()
    db.refresh(project)
    return project


def get_project_for_member(db: Session, project_id: str, user_id: str) -> Project:
    """
    Resolve the project's org, then make sure `user_id` belongs to it.
    """
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    require_membership(db, project.org_id, user_id)
    return project


def get_task_for_member(db: Session, task_id: str, user_id: str) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    require_membership(db, task.org_id, user_id)
    return task


def get_project_column(db: Session, project_id: str, column_id: str) -> BoardColumn | None:
    return (
        db.query(BoardColumn)
        .filter(BoardColumn.id == column_id, BoardColumn.project_id == project_id)
        .first()
    )


def resolve_task_column(db: Session, project_id: str, column_id: str | None) -> BoardColumn:
    """
    Explicit column must belong to the project; otherwise fall back to Backlog (position 0).
    """
    if column_id:
        col = get_project_column(db, project_id, column_id)
        if not col:
            raise ValidationError("Invalid columnId for this project")
        return col

    col = (
        db.query(BoardColumn)
        .filter(BoardColumn.project_id == project_id, BoardColumn.position == 0)
        .first()
    )
    if not col:
        # Every project gets its columns at creation, so this means a broken row.
        raise RuntimeError(f"Backlog column not found for project {project_id}")
    return col


def load_board(db: Session, project: Project) -> list[dict]:
    columns = (
        db.query(BoardColumn)
        .filter(BoardColumn.project_id == project.id)
        .order_by(BoardColumn.position.asc())
        .all()
    )
    tasks = (
        db.query(Task)
        .filter(Task.project_id == project.id)
        .order_by(Task.created_at.asc())
        .all()
    )

    tasks_by_column: dict[str, list[Task]] = {}
    for t in tasks:
        tasks_by_column.setdefault(t.column_id, []).append(t)

    return [
        {"id": c.id, "name": c.name, "position": c.position, "tasks": tasks_by_column.get(c.id, [])}
        for c in columns
    ]
