"""Conversation assembly and transcript persistence for the chat endpoint.

A chat turn is built from three sources, in order:

1. the project's current ``system`` prompts, merged into one system message;
2. the stored transcript of the conversation being continued (if any);
3. the new user message.

The gateway reply is appended and the whole list is written back. System
prompts are re-read on every turn and never pinned to the conversation, so the
stored transcript keeps whatever preamble was current when each turn ran.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.conversation import Conversation
from models.project import Project, Prompt
from models.user import User

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_SEPARATOR = "\n\n"


def build_system_message(db: Session, project_id: int) -> dict | None:
    """Merge the project's system prompts into one message, or None if it has none."""
    contents = [
        content
        for (content,) in db.query(Prompt.content)
        .filter(Prompt.project_id == project_id, Prompt.type == "system")
        .order_by(Prompt.created_at, Prompt.id)
        .all()
    ]
    if not contents:
        return None
    return {"role": "system", "content": SYSTEM_PROMPT_SEPARATOR.join(contents)}


def get_conversation(
    db: Session, conversation_id: int, project_id: int, user: User
) -> Conversation | None:
    return (
        db.query(Conversation)
        .filter(
            Conversation.id == conversation_id,
            Conversation.project_id == project_id,
            Conversation.user_id == user.id,
        )
        .first()
    )


def load_history(db: Session, conversation_id: int, project_id: int, user: User) -> list[dict]:
    """Stored messages of a conversation; an unknown id yields an empty history."""
    conversation = get_conversation(db, conversation_id, project_id, user)
    if conversation is None:
        logger.info(
            "Conversation %s not found for project %s, starting from empty history",
            conversation_id, project_id,
        )
        return []
    return list(conversation.messages or [])


def assemble_messages(
    db: Session,
    project: Project,
    user: User,
    message: str,
    conversation_id: int | None = None,
) -> list[dict]:
    """Build the outbound message list for one chat turn."""
    messages: list[dict] = []

    system_message = build_system_message(db, project.id)
    if system_message is not None:
        messages.append(system_message)

    if conversation_id:
        messages.extend(load_history(db, conversation_id, project.id, user))

    messages.append({"role": "user", "content": message})
    return messages


def save_transcript(
    db: Session,
    project: Project,
    user: User,
    messages: list[dict],
    conversation_id: int | None = None,
) -> int | None:
    """Persist the full transcript and return the conversation id.

    Creates a new conversation when *conversation_id* is not given, otherwise
    overwrites the stored messages of that conversation. Store failures are
    logged and swallowed: a failed insert returns None.
    """
    if not conversation_id:
        conversation = Conversation(project_id=project.id, user_id=user.id, messages=messages)
        try:
            db.add(conversation)
            db.commit()
            db.refresh(conversation)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create conversation for project %s", project.id)
            return None
        return conversation.id

    try:
        (
            db.query(Conversation)
            .filter(
                Conversation.id == conversation_id,
                Conversation.project_id == project.id,
                Conversation.user_id == user.id,
            )
            .update({Conversation.messages: messages})
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update conversation %s", conversation_id)
    return conversation_id
