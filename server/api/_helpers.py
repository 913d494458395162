"""Shared helpers for API routers."""

from __future__ import annotations

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from models.project import Project, Prompt
from models.user import User


def require_fields(payload: BaseModel, *fields: str) -> None:
    """Raise 400 naming every field in *fields* that is absent or empty."""
    missing = [f for f in fields if getattr(payload, f, None) in (None, "")]
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required fields: {', '.join(missing)}.",
        )


def get_project(project_id: int, user: User, db: Session) -> Project:
    """Look up a project by id, checking ownership."""
    project = (
        db.query(Project)
        .filter(Project.id == project_id, Project.user_id == user.id)
        .first()
    )
    if not project:
        raise HTTPException(status_code=404, detail="Project not found.")
    return project


def get_prompt(prompt_id: int, user: User, db: Session) -> Prompt:
    """Look up a prompt by id, checking ownership through its project."""
    prompt = (
        db.query(Prompt)
        .join(Project, Prompt.project_id == Project.id)
        .filter(Prompt.id == prompt_id, Project.user_id == user.id)
        .first()
    )
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")
    return prompt
