"""Project CRUD router."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api._helpers import get_project, require_fields
from auth import get_current_user
from config import settings
from database import get_db
from models.project import Project, Prompt
from models.user import User
from schemas.project import ProjectEnvelope, ProjectIn, ProjectList, ProjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProjectList)
def list_projects(
    limit: int | None = None,
    offset: int = 0,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    base = (
        db.query(Project)
        .filter(Project.user_id == user.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    total = base.count()
    projects = base.offset(offset).limit(limit).all()
    return {"projects": projects, "total": total}


@router.post("", response_model=ProjectEnvelope, status_code=201)
def create_project(
    payload: ProjectIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_fields(payload, "name")
    project = Project(
        user_id=user.id,
        name=payload.name,
        description=payload.description or "",
        model=payload.model or settings.DEFAULT_PROJECT_MODEL,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return {"project": project}


@router.get("/{project_id}", response_model=ProjectEnvelope)
def get_project_detail(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"project": get_project(project_id, user, db)}


@router.put("/{project_id}", response_model=ProjectEnvelope)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project(project_id, user, db)
    for attr, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(project, attr, value)
    db.commit()
    db.refresh(project)
    return {"project": project}


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project(project_id, user, db)
    # Prompts first (no FK cascade on prompts), then the project, in one commit
    deleted = db.query(Prompt).filter(Prompt.project_id == project.id).delete()
    db.delete(project)
    db.commit()
    logger.info("Deleted project %s and %d prompts", project_id, deleted)
