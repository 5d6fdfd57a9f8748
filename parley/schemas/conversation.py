"""Conversation schemas: messages replayed to the model as context."""

from __future__ import annotations

import secrets
import string
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 7


def new_id(length: int = _ID_LENGTH) -> str:
    """Return a short random URL-safe identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class Role(StrEnum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One entry of the conversation history. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Unique message id")
    role: Role = Field(description="Who wrote the message")
    content: str = Field(description="Plain message text")

    def to_context(self) -> dict[str, str]:
        """Return the plain {role, content} pair sent to the model."""
        return {"role": self.role.value, "content": self.content}
