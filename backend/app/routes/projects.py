from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ValidationError
from app.dependencies.auth import get_current_user
from app.dependencies.orgs import require_org_member
from app.models.membership import Membership
from app.models.project import Project
from app.models.user import User
from app.schemas.project import BoardOut, ProjectCreate, ProjectEnvelope, ProjectListOut
from app.services.boards import create_project, get_project_for_member, load_board

router = APIRouter(prefix="/api", tags=["projects"], dependencies=[Depends(get_current_user)])


@router.post("/orgs/{org_id}/projects", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def create_org_project(
    org_id: str,
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    _: Membership = Depends(require_org_member),
):
    name = payload.name.strip()
    if not name:
        raise ValidationError("Name is required")

    project = create_project(db, org_id=org_id, name=name, actor_user_id=user.id)
    return {"project": project}


@router.get("/orgs/{org_id}/projects", response_model=ProjectListOut)
def list_org_projects(
    org_id: str,
    db: Session = Depends(get_db),
    _: Membership = Depends(require_org_member),
):
    projects = (
        db.query(Project)
        .filter(Project.org_id == org_id)
        .order_by(Project.created_at.asc())
        .all()
    )
    return {"projects": projects}


@router.get("/projects/{project_id}/board", response_model=BoardOut)
def get_board(
    project_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project_for_member(db, project_id, user.id)
    return {"columns": load_board(db, project)}
