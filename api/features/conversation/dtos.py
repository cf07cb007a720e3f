"""DTOs for the Conversation feature."""
from typing import List

from pydantic import Field

from api.features.conversation.entities.conversation import MessageRole
from api.shared.dtos import BaseDTO


class MessageDTO(BaseDTO):
    """Conversation message DTO."""

    role: MessageRole = Field(description="Message role: user, assistant or system")
    content: str = Field(description="Message content")
    timestamp: int = Field(description="Epoch milliseconds assigned by the store")


class AppendMessageRequest(BaseDTO):
    """Append a message to a conversation."""

    role: str = Field(description="Message role: user, assistant or system")
    content: str = Field(description="Message content")


class MessagesResponse(BaseDTO):
    """Messages list response."""

    conversation_id: str = Field(description="Conversation identifier")
    items: List[MessageDTO] = Field(description="Messages in chronological order")
    total: int = Field(description="Total messages returned")
