"""Domain models for the Conversation feature."""
from typing import List

from pydantic import BaseModel, Field

from api.features.conversation.entities.conversation import (
    ConversationMessage as ConversationMessageEntity,
    MessageRole,
)


class Message(BaseModel):
    """One stored turn of a conversation. Immutable once stored."""

    role: MessageRole = Field(description="Message author")
    content: str = Field(description="Message text")
    timestamp: int = Field(description="Epoch milliseconds assigned at append time")

    class Config:
        from_attributes = True
        frozen = True

    @classmethod
    def from_entity(cls, entity: ConversationMessageEntity) -> "Message":
        """Create model from database entity."""
        return cls(
            role=MessageRole(entity.role),
            content=entity.content,
            timestamp=entity.timestamp,
        )


class ConversationHistory(BaseModel):
    """Ordered, append-only message sequence of one conversation."""

    conversation_id: str = Field(description="Conversation identifier")
    messages: List[Message] = Field(
        default_factory=list, description="Messages in append order"
    )

    def __len__(self) -> int:
        return len(self.messages)

    def is_empty(self) -> bool:
        return not self.messages
