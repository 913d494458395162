"""Prompt CRUD router."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api._helpers import get_project, get_prompt, require_fields
from auth import get_current_user
from database import get_db
from models.project import Prompt
from models.user import User
from schemas.prompt import PromptEnvelope, PromptIn, PromptList, PromptUpdate

router = APIRouter()


@router.get("/project/{project_id}", response_model=PromptList)
def list_project_prompts(
    project_id: int,
    limit: int | None = None,
    offset: int = 0,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project(project_id, user, db)
    base = (
        db.query(Prompt)
        .filter(Prompt.project_id == project.id)
        .order_by(Prompt.created_at.desc(), Prompt.id.desc())
    )
    total = base.count()
    prompts = base.offset(offset).limit(limit).all()
    return {"prompts": prompts, "total": total}


@router.get("/{prompt_id}", response_model=PromptEnvelope)
def get_prompt_detail(
    prompt_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"prompt": get_prompt(prompt_id, user, db)}


@router.post("", response_model=PromptEnvelope, status_code=201)
def create_prompt(
    payload: PromptIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_fields(payload, "project_id", "name", "content")
    project = get_project(payload.project_id, user, db)
    prompt = Prompt(
        project_id=project.id,
        name=payload.name,
        content=payload.content,
        type=payload.type or "system",
    )
    db.add(prompt)
    db.commit()
    db.refresh(prompt)
    return {"prompt": prompt}


@router.put("/{prompt_id}", response_model=PromptEnvelope)
def update_prompt(
    prompt_id: int,
    payload: PromptUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    prompt = get_prompt(prompt_id, user, db)
    for attr, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(prompt, attr, value)
    db.commit()
    db.refresh(prompt)
    return {"prompt": prompt}


@router.delete("/{prompt_id}", status_code=204)
def delete_prompt(
    prompt_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    prompt = get_prompt(prompt_id, user, db)
    db.delete(prompt)
    db.commit()
