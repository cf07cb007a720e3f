"""Conversation store: per-conversation serialized access to a durable history.

Every operation for a conversation id is admitted to that id's actor and runs
there one at a time, so an append is a single read-modify-write step that no
other operation on the same id can interleave with. Different ids use
different actors and share no mutable state.

The actor keeps the history it has loaded. It is only extended after the
database transaction commits. A failed write drops the cached history, so the
next operation rereads it from the database; a commit whose acknowledgement
was lost can therefore never leave the cache behind the stored history.
With ``max_cached_histories`` set, only that many actors (and their loaded
histories) are kept; the least recently used idle ones are dropped.
"""
from __future__ import annotations

import time
from typing import Callable, List, Optional, Union

import structlog
from sqlalchemy.exc import SQLAlchemyError

from api.features.conversation.entities.conversation import (
    CONVERSATION_ID_MAX_LENGTH,
    MessageRole,
)
from api.features.conversation.exceptions import (
    InvalidConversationIdError,
    InvalidMessageError,
    StorageUnavailableError,
)
from api.features.conversation.models import ConversationHistory, Message
from api.features.conversation.repository import ConversationRepository
from infra.actors import Actor, ActorRegistry
from infra.resources import DatabaseResource

logger = structlog.get_logger("conversation.store")

STORAGE_ERRORS = (SQLAlchemyError, OSError)


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ConversationActor(Actor):
    """Actor owning the loaded history of one conversation."""

    def __init__(self, key: str):
        super().__init__(key)
        self.messages: Optional[List[Message]] = None


class ConversationStore:
    """Append/read access to conversation histories backed by the database."""

    def __init__(
        self,
        database: DatabaseResource,
        *,
        max_message_length: Optional[int] = None,
        max_id_length: int = CONVERSATION_ID_MAX_LENGTH,
        max_cached_histories: Optional[int] = None,
        clock: Callable[[], int] = epoch_millis,
    ):
        self.database = database
        self.max_message_length = max_message_length
        self.max_id_length = min(max_id_length, CONVERSATION_ID_MAX_LENGTH)
        self._clock = clock
        self._actors: ActorRegistry[ConversationActor] = ActorRegistry(
            ConversationActor, capacity=max_cached_histories
        )

    @property
    def active_conversations(self) -> int:
        return len(self._actors)

    async def append_message(
        self,
        conversation_id: str,
        role: Union[MessageRole, str],
        content: str,
    ) -> Message:
        """Append a message and persist it. Returns the stored message.

        Raises:
            InvalidConversationIdError: the id cannot address a history.
            InvalidMessageError: unknown role, or content that is not text or
                exceeds the configured length. Nothing is admitted.
            StorageUnavailableError: the write did not commit. The history is
                unchanged.
        """
        self._validate_id(conversation_id)
        message_role = self._validate_role(role)
        self._validate_content(content)

        actor = self._actors.get(conversation_id)
        return await actor.submit(
            lambda: self._append(actor, message_role, content)
        )

    async def get_history(self, conversation_id: str) -> ConversationHistory:
        """Full history in append order; empty if the conversation does not exist."""
        self._validate_id(conversation_id)

        actor = self._actors.get(conversation_id)
        messages = await actor.submit(lambda: self._load(actor))
        return ConversationHistory(
            conversation_id=conversation_id, messages=list(messages)
        )

    async def drain(self) -> None:
        """Wait for every admitted operation to finish."""
        await self._actors.drain()

    async def _load(self, actor: ConversationActor) -> List[Message]:
        if actor.messages is not None:
            return actor.messages

        try:
            async with self.database.get_session() as session:
                entities = await ConversationRepository(session).fetch_messages(
                    actor.key
                )
        except STORAGE_ERRORS as exc:
            logger.error(
                "Failed to load conversation history",
                conversation_id=actor.key,
                error=type(exc).__name__,
            )
            actor.messages = None
            raise StorageUnavailableError(actor.key, "read", str(exc)) from exc

        actor.messages = [Message.from_entity(entity) for entity in entities]
        logger.debug(
            "Conversation history loaded",
            conversation_id=actor.key,
            messages=len(actor.messages),
        )
        return actor.messages

    async def _append(
        self, actor: ConversationActor, role: MessageRole, content: str
    ) -> Message:
        messages = await self._load(actor)
        last_timestamp = messages[-1].timestamp if messages else 0
        message = Message(
            role=role,
            content=content,
            timestamp=max(self._clock(), last_timestamp),
        )
        position = len(messages)

        try:
            async with self.database.get_session() as session:
                async with session.begin():
                    await ConversationRepository(session).append_message(
                        actor.key,
                        position=position,
                        role=message.role,
                        content=message.content,
                        timestamp=message.timestamp,
                    )
        except STORAGE_ERRORS as exc:
            logger.error(
                "Failed to persist message",
                conversation_id=actor.key,
                position=position,
                role=role.value,
                error=type(exc).__name__,
            )
            # The commit may have reached the database; reload before the next operation.
            actor.messages = None
            raise StorageUnavailableError(actor.key, "append", str(exc)) from exc

        messages.append(message)
        logger.info(
            "Message appended",
            conversation_id=actor.key,
            position=position,
            role=role.value,
        )
        return message

    def _validate_id(self, conversation_id: str) -> None:
        if not isinstance(conversation_id, str) or not conversation_id.strip():
            raise InvalidConversationIdError("must be a non-empty string")
        if len(conversation_id) > self.max_id_length:
            raise InvalidConversationIdError(
                f"longer than {self.max_id_length} characters"
            )

    @staticmethod
    def _validate_role(role: Union[MessageRole, str]) -> MessageRole:
        try:
            return MessageRole(role)
        except ValueError:
            raise InvalidMessageError(
                f"Unsupported role: {role!r}",
                {"allowed": [r.value for r in MessageRole]},
            ) from None

    def _validate_content(self, content: str) -> None:
        if content is None:
            raise InvalidMessageError("Message content is missing")
        if not isinstance(content, str):
            raise InvalidMessageError(
                "Message content must be text",
                {"type": type(content).__name__},
            )
        if self.max_message_length is not None and len(content) > self.max_message_length:
            raise InvalidMessageError(
                f"Message content exceeds {self.max_message_length} characters",
                {"length": len(content), "limit": self.max_message_length},
            )
