"""DTOs for the Lectures feature."""
from typing import List

from pydantic import Field

from api.features.conversation.dtos import MessageDTO
from api.shared.dtos import BaseDTO


class LectureUploadResponse(BaseDTO):
    """Response after a lecture upload opened a conversation."""

    conversation_id: str = Field(description="Identifier for all further chat calls")
    filename: str = Field(description="Uploaded filename")
    size: int = Field(description="Lecture size in bytes")
    checksum: str = Field(description="SHA-256 of the lecture bytes")


class ChatRequest(BaseDTO):
    """A user chat message about an uploaded lecture."""

    message: str = Field(description="User message text")


class ChatResponse(BaseDTO):
    """Assistant reply plus the conversation so far."""

    conversation_id: str = Field(description="Conversation identifier")
    reply: MessageDTO = Field(description="Stored assistant message")
    history: List[MessageDTO] = Field(description="Full history including this turn")
