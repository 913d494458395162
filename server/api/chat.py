"""Chat endpoint and conversation history."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api._helpers import get_project
from auth import get_current_user
from config import settings
from database import get_db
from models.conversation import Conversation
from models.user import User
from schemas.chat import ChatRequest, ChatResponse, ConversationEnvelope, ConversationList
from services.completion import CompletionError, CompletionGateway
from services.conversation import assemble_messages, save_transcript

logger = logging.getLogger(__name__)

router = APIRouter()


def get_completion_gateway() -> CompletionGateway | None:
    """FastAPI dependency: gateway built from settings, or None when no key is configured."""
    if not settings.OPENROUTER_API_KEY:
        return None
    return CompletionGateway.from_settings(settings)


@router.post("", response_model=ChatResponse)
def send_message(
    payload: ChatRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    gateway: CompletionGateway | None = Depends(get_completion_gateway),
):
    if not payload.project_id or not payload.message:
        raise HTTPException(status_code=400, detail="Project ID and message are required.")
    project = get_project(payload.project_id, user, db)

    messages = assemble_messages(db, project, user, payload.message, payload.conversation_id)

    if gateway is None:
        logger.error("OPENROUTER_API_KEY is not set; cannot serve chat for project %s", project.id)
        raise HTTPException(status_code=500, detail="OpenRouter API key is not configured.")

    try:
        completion = gateway.complete(
            messages,
            model=settings.CHAT_MODEL,
            max_tokens=settings.CHAT_MAX_TOKENS,
            temperature=settings.CHAT_TEMPERATURE,
        )
    except CompletionError as exc:
        logger.error("Completion gateway failed for project %s: %s %s", project.id, exc, exc.body)
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to get AI response.", "upstream": exc.body},
        )

    messages.append({"role": "assistant", "content": completion.content})
    conversation_id = save_transcript(db, project, user, messages, payload.conversation_id)

    return {
        "message": completion.content,
        "conversation_id": conversation_id,
        "usage": completion.usage,
    }


@router.get("/conversation/{conversation_id}", response_model=ConversationEnvelope)
def get_conversation_detail(
    conversation_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    conversation = (
        db.query(Conversation)
        .filter(Conversation.id == conversation_id, Conversation.user_id == user.id)
        .first()
    )
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found.")
    return {"conversation": conversation}


@router.get("/project/{project_id}", response_model=ConversationList)
def list_project_conversations(
    project_id: int,
    limit: int | None = None,
    offset: int = 0,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    project = get_project(project_id, user, db)
    base = (
        db.query(Conversation)
        .filter(Conversation.project_id == project.id, Conversation.user_id == user.id)
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
    )
    total = base.count()
    conversations = base.offset(offset).limit(limit).all()
    return {"conversations": conversations, "total": total}
