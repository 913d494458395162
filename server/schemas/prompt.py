"""Prompt schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

PromptType = Literal["system", "user", "assistant"]


class PromptIn(BaseModel):
    project_id: int | None = None
    name: str | None = None
    content: str | None = None
    type: PromptType | None = None


class PromptUpdate(BaseModel):
    name: str | None = None
    content: str | None = None
    type: PromptType | None = None


class PromptOut(BaseModel):
    id: int
    project_id: int
    name: str
    content: str
    type: PromptType
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PromptEnvelope(BaseModel):
    prompt: PromptOut


class PromptList(BaseModel):
    prompts: list[PromptOut]
    total: int
