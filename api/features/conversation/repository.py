"""Repository for conversation persistence operations."""
from __future__ import annotations

from typing import List

from sqlalchemy import select

from api.features.conversation.entities.conversation import (
    Conversation,
    ConversationMessage,
    MessageRole,
)
from api.shared.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Reads and appends conversation messages within the caller's transaction."""

    model = Conversation

    async def fetch_messages(self, conversation_id: str) -> List[ConversationMessage]:
        """All messages of a conversation in append order."""
        stmt = (
            select(ConversationMessage)
            .where(ConversationMessage.conversation_id == conversation_id)
            .order_by(ConversationMessage.position)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def append_message(
        self,
        conversation_id: str,
        *,
        position: int,
        role: MessageRole,
        content: str,
        timestamp: int,
    ) -> ConversationMessage:
        """Insert a message at ``position``, creating the conversation row if needed.

        The unique ``(conversation_id, position)`` constraint rejects a second
        writer that computed the same slot from a stale read.
        """
        conversation = await self.get_by_id(conversation_id)
        if conversation is None:
            conversation = await self.create(
                Conversation(id=conversation_id, message_count=0)
            )

        message = ConversationMessage(
            conversation_id=conversation_id,
            position=position,
            role=role,
            content=content,
            timestamp=timestamp,
        )
        self.session.add(message)
        conversation.message_count = position + 1
        await self.session.flush()
        return message
