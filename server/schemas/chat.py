"""Chat and conversation schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    project_id: int | None = None
    message: str | None = None
    conversation_id: int | None = None


class ChatResponse(BaseModel):
    message: str
    conversation_id: int | None = None
    usage: dict | None = None


class ConversationOut(BaseModel):
    id: int
    project_id: int
    user_id: int
    messages: list[ChatMessage]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationSummary(BaseModel):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationEnvelope(BaseModel):
    conversation: ConversationOut


class ConversationList(BaseModel):
    conversations: list[ConversationSummary]
    total: int
