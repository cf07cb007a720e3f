"""Controller for the Conversation feature."""
from api.features.conversation.dtos import (
    AppendMessageRequest,
    MessageDTO,
    MessagesResponse,
)
from api.features.conversation.models import ConversationHistory, Message
from api.features.conversation.service import ConversationStore


def to_message_dto(message: Message) -> MessageDTO:
    return MessageDTO(
        role=message.role, content=message.content, timestamp=message.timestamp
    )


def to_messages_response(history: ConversationHistory) -> MessagesResponse:
    items = [to_message_dto(m) for m in history.messages]
    return MessagesResponse(
        conversation_id=history.conversation_id, items=items, total=len(items)
    )


class ConversationController:
    """Controller exposing the conversation store's append/read operations."""

    def __init__(self, conversation_store: ConversationStore) -> None:
        self.conversation_store = conversation_store

    async def get_messages(self, *, conversation_id: str) -> MessagesResponse:
        history = await self.conversation_store.get_history(conversation_id)
        return to_messages_response(history)

    async def append_message(
        self,
        *,
        conversation_id: str,
        request: AppendMessageRequest,
    ) -> MessageDTO:
        message = await self.conversation_store.append_message(
            conversation_id, request.role, request.content
        )
        return to_message_dto(message)
