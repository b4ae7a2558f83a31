"""Conversation message model for the tech pack chat transcript."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, Field

from techpack_agent.models.edit_action import EditAction


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Intent(StrEnum):
    """Classification of a user utterance."""

    EDIT = "edit"
    QUESTION = "question"
    CHAT = "chat"


class MessageMetadata(BaseModel):
    section: str | None = None
    quick_action: str | None = None
    intent: Intent | None = None
    edit_action: EditAction | None = None
    edit_applied: bool | None = None
    is_loading: bool = False
    error: str | None = None


class ConversationMessage(BaseModel):
    """A single entry in a session transcript."""

    id: str = Field(default_factory=lambda: f"msg-{uuid4().hex}")
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)
