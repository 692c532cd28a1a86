"""Transient chat models for the knowledge-base conversation."""

from enum import Enum

from pydantic import BaseModel, Field

from insightvault.models.base import now_ms


class ChatRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """One turn of a knowledge-base conversation. Never persisted."""

    role: ChatRole
    text: str
    timestamp: int = Field(default_factory=now_ms)
