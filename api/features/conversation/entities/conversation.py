"""Conversation entities: one row per conversation plus its ordered messages."""
from enum import Enum

from sqlalchemy import (
    BigInteger,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity

CONVERSATION_ID_MAX_LENGTH = 128


class MessageRole(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Conversation(BaseEntity):
    """Conversation header, keyed by the caller-supplied conversation id."""

    id: Mapped[str] = mapped_column(
        String(CONVERSATION_ID_MAX_LENGTH), primary_key=True
    )
    message_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ConversationMessage(BaseEntity):
    """A single stored turn. ``position`` is the 0-based append index."""

    __tablename__ = "conversation_message"
    __table_args__ = (
        UniqueConstraint(
            "conversation_id", "position", name="uq_conversation_message_position"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(
        String(CONVERSATION_ID_MAX_LENGTH),
        ForeignKey("conversation.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[MessageRole] = mapped_column(
        SQLEnum(
            MessageRole,
            name="message_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Epoch milliseconds assigned by the store.
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
