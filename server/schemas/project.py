"""Project schemas."""

from datetime import datetime

from pydantic import BaseModel


class ProjectIn(BaseModel):
    name: str | None = None
    description: str | None = None
    model: str | None = None


class ProjectUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    model: str | None = None


class ProjectOut(BaseModel):
    id: int
    user_id: int
    name: str
    description: str
    model: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectEnvelope(BaseModel):
    project: ProjectOut


class ProjectList(BaseModel):
    projects: list[ProjectOut]
    total: int
