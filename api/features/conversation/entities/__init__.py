from api.features.conversation.entities.conversation import (
    Conversation,
    ConversationMessage,
    MessageRole,
)

__all__ = ["Conversation", "ConversationMessage", "MessageRole"]
