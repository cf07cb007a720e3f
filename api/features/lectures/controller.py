"""Controller for the Lectures feature."""
import hashlib
import logging
from uuid import uuid4

from fastapi import UploadFile

from api.features.conversation.controller import (
    to_message_dto,
    to_messages_response,
)
from api.features.conversation.dtos import MessagesResponse
from api.features.conversation.entities.conversation import MessageRole
from api.features.conversation.service import ConversationStore
from api.features.lectures.answering import AnswerGenerator
from api.features.lectures.dtos import ChatResponse, LectureUploadResponse
from api.features.lectures.exceptions import AnswerGenerationError
from api.features.lectures.validators import LectureValidator

logger = logging.getLogger("lecture_chat.lectures")


class LectureController:
    """Opens lecture conversations and runs chat turns against them."""

    def __init__(
        self,
        conversation_store: ConversationStore,
        answer_generator: AnswerGenerator,
        *,
        id_prefix: str = "lec-",
        max_upload_bytes: int = 10 * 1024 * 1024,
    ):
        self.conversation_store = conversation_store
        self.answer_generator = answer_generator
        self.id_prefix = id_prefix
        self.max_upload_bytes = max_upload_bytes

    def new_conversation_id(self) -> str:
        return f"{self.id_prefix}{uuid4().hex}"

    async def upload_lecture(self, file: UploadFile) -> LectureUploadResponse:
        """Store the lecture as the opening system message of a new conversation."""
        text = await LectureValidator.validate_upload(file, self.max_upload_bytes)
        content = text.encode("utf-8")

        conversation_id = self.new_conversation_id()
        await self.conversation_store.append_message(
            conversation_id, MessageRole.SYSTEM, text
        )
        logger.info("Lecture %s opened conversation %s", file.filename, conversation_id)

        return LectureUploadResponse(
            conversation_id=conversation_id,
            filename=file.filename,
            size=len(content),
            checksum=hashlib.sha256(content).hexdigest(),
        )

    async def chat(self, *, conversation_id: str, message: str) -> ChatResponse:
        """Record the user message, generate a reply and record it too."""
        text = LectureValidator.validate_chat_message(message)

        await self.conversation_store.append_message(
            conversation_id, MessageRole.USER, text
        )
        history = await self.conversation_store.get_history(conversation_id)

        try:
            reply_text = await self.answer_generator.generate(text, history)
        except Exception as e:
            logger.exception("Answer generation failed for %s", conversation_id)
            raise AnswerGenerationError(conversation_id, str(e)) from e

        reply = await self.conversation_store.append_message(
            conversation_id, MessageRole.ASSISTANT, reply_text
        )
        history = await self.conversation_store.get_history(conversation_id)

        return ChatResponse(
            conversation_id=conversation_id,
            reply=to_message_dto(reply),
            history=[to_message_dto(m) for m in history.messages],
        )

    async def get_history(self, *, conversation_id: str) -> MessagesResponse:
        history = await self.conversation_store.get_history(conversation_id)
        return to_messages_response(history)
