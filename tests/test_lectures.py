import hashlib
import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import AppendMessageRequest
from api.features.conversation.entities import MessageRole
from api.features.conversation.exceptions import InvalidMessageError
from api.features.lectures.answering import AnswerGenerator, PlaceholderAnswerGenerator
from api.features.lectures.controller import LectureController
from api.features.lectures.exceptions import (
    AnswerGenerationError,
    LectureValidationError,
)

LECTURE = "Thermodynamics, lecture 3.\nEntropy measures disorder.\n"


def upload(content: bytes, filename: str = "lecture.txt", content_type: str = "text/plain"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class RecordingGenerator:
    def __init__(self):
        self.calls = []

    async def generate(self, question, history):
        self.calls.append((question, [m.content for m in history.messages]))
        return "Entropy measures disorder."


class BrokenGenerator:
    async def generate(self, question, history):
        raise RuntimeError("model offline")


@pytest.fixture
def generator():
    return RecordingGenerator()


@pytest.fixture
def controller(store, generator):
    return LectureController(store, generator, max_upload_bytes=1024)


async def test_upload_opens_conversation_with_lecture(controller, store):
    result = await controller.upload_lecture(upload(LECTURE.encode()))

    assert result.conversation_id.startswith("lec-")
    assert result.filename == "lecture.txt"
    assert result.size == len(LECTURE.encode())
    assert result.checksum == hashlib.sha256(LECTURE.encode()).hexdigest()

    history = await store.get_history(result.conversation_id)
    assert [(m.role, m.content) for m in history.messages] == [
        (MessageRole.SYSTEM, LECTURE)
    ]


async def test_each_upload_gets_its_own_conversation(controller):
    first = await controller.upload_lecture(upload(b"one"))
    second = await controller.upload_lecture(upload(b"two"))

    assert first.conversation_id != second.conversation_id


async def test_custom_id_prefix(store, generator):
    controller = LectureController(store, generator, id_prefix="course-")

    result = await controller.upload_lecture(upload(b"notes", filename="notes.md", content_type="text/markdown"))

    assert result.conversation_id.startswith("course-")


@pytest.mark.parametrize(
    "file",
    [
        upload(b"%PDF-1.7", filename="lecture.pdf", content_type="application/pdf"),
        upload(b"text", filename="lecture.txt", content_type="image/png"),
        upload(b"   \n", filename="lecture.txt"),
        upload(b"\xff\xfe\x00", filename="lecture.txt"),
        upload(b"x" * 2048, filename="lecture.txt"),
    ],
    ids=["pdf", "mime", "blank", "not-utf8", "too-large"],
)
async def test_rejected_uploads_store_nothing(controller, store, file):
    with pytest.raises(LectureValidationError):
        await controller.upload_lecture(file)

    assert store.active_conversations == 0


async def test_chat_turn_records_question_and_reply(controller, generator):
    lecture = await controller.upload_lecture(upload(LECTURE.encode()))

    result = await controller.chat(
        conversation_id=lecture.conversation_id, message="  What is entropy?  "
    )

    assert result.conversation_id == lecture.conversation_id
    assert result.reply.role == MessageRole.ASSISTANT
    assert result.reply.content == "Entropy measures disorder."
    assert [(m.role, m.content) for m in result.history] == [
        (MessageRole.SYSTEM, LECTURE),
        (MessageRole.USER, "What is entropy?"),
        (MessageRole.ASSISTANT, "Entropy measures disorder."),
    ]
    assert generator.calls == [("What is entropy?", [LECTURE, "What is entropy?"])]
    timestamps = [m.timestamp for m in result.history]
    assert timestamps == sorted(timestamps)


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
async def test_empty_chat_message_is_rejected(controller, store, message):
    with pytest.raises(LectureValidationError):
        await controller.chat(conversation_id="lec-1", message=message)

    assert (await store.get_history("lec-1")).is_empty()


async def test_generator_failure_keeps_user_message(store):
    controller = LectureController(store, BrokenGenerator())

    with pytest.raises(AnswerGenerationError) as excinfo:
        await controller.chat(conversation_id="lec-1", message="What is entropy?")

    assert excinfo.value.details == {"conversation_id": "lec-1"}
    history = await store.get_history("lec-1")
    assert [(m.role, m.content) for m in history.messages] == [
        (MessageRole.USER, "What is entropy?")
    ]


async def test_history_endpoint_payload(controller):
    await controller.chat(conversation_id="lec-1", message="What is entropy?")

    result = await controller.get_history(conversation_id="lec-1")

    assert result.conversation_id == "lec-1"
    assert result.total == 2
    assert [m.role for m in result.items] == [MessageRole.USER, MessageRole.ASSISTANT]


async def test_placeholder_generator_acknowledges_question(store):
    generator = PlaceholderAnswerGenerator()
    history = await store.get_history("lec-1")

    reply = await generator.generate("What is entropy?", history)

    assert isinstance(generator, AnswerGenerator)
    assert reply == 'Received your question: "What is entropy?".'


async def test_conversation_controller_append_and_read(store):
    controller = ConversationController(store)

    appended = await controller.append_message(
        conversation_id="lec-1",
        request=AppendMessageRequest(role="user", content="What is entropy?"),
    )
    listed = await controller.get_messages(conversation_id="lec-1")

    assert appended.role == MessageRole.USER
    assert listed.items == [appended]
    assert listed.total == 1

    with pytest.raises(InvalidMessageError):
        await controller.append_message(
            conversation_id="lec-1",
            request=AppendMessageRequest(role="narrator", content="..."),
        )
