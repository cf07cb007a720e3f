"""Exceptions for the Conversation feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import LectureChatException


class ConversationException(LectureChatException):
    """Base exception for conversation operations."""
    pass


class InvalidMessageError(ConversationException):
    """Raised when a message is rejected before reaching the history."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_MESSAGE", details)


class InvalidConversationIdError(ConversationException):
    """Raised when a conversation identifier cannot address a history."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid conversation id: {reason}",
            "INVALID_CONVERSATION_ID",
            {"reason": reason},
        )


class StorageUnavailableError(ConversationException):
    """Raised when the durable store could not complete a read or write."""

    retryable = True

    def __init__(self, conversation_id: str, operation: str, cause: str):
        super().__init__(
            f"Storage unavailable during {operation} for conversation '{conversation_id}'",
            "STORAGE_UNAVAILABLE",
            {
                "conversation_id": conversation_id,
                "operation": operation,
                "cause": cause,
            },
        )
