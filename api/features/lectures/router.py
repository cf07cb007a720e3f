"""Router for the Lectures feature."""
import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, HTTPException, Path, UploadFile

from di.container import ApplicationContainer as DependencyContainer
from api.features.conversation.dtos import MessagesResponse
from api.features.conversation.exceptions import (
    InvalidConversationIdError,
    InvalidMessageError,
    StorageUnavailableError,
)
from api.features.lectures.controller import LectureController
from api.features.lectures.dtos import (
    ChatRequest,
    ChatResponse,
    LectureUploadResponse,
)
from api.features.lectures.exceptions import (
    AnswerGenerationError,
    LectureValidationError,
)
from api.shared.dtos import HealthCheckResponse
from api.shared.response import ResponseModel

router = APIRouter()
logger = logging.getLogger("lecture_chat.lectures.router")

ConversationIdPath = Path(
    ..., min_length=1, max_length=128, description="Conversation identifier"
)


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    """Health check endpoint for lectures service."""
    return ResponseModel.success(
        data=HealthCheckResponse(
            status="healthy", dependencies={"database": "ok", "answers": "ok"}
        ),
        message="Lectures service is healthy",
    )


@router.post("/upload", response_model=ResponseModel[LectureUploadResponse])
@inject
async def upload_lecture(
    file: UploadFile = File(...),
    controller: LectureController = Depends(
        Provide[DependencyContainer.controllers.lecture_controller]
    ),
):
    """Upload a lecture and open a conversation about it."""
    try:
        result = await controller.upload_lecture(file)
        return ResponseModel.success(
            data=result, message=f"Lecture {file.filename} uploaded successfully"
        )
    except (LectureValidationError, InvalidMessageError) as e:
        raise HTTPException(status_code=422, detail=e.message)
    except StorageUnavailableError as e:
        logger.warning("Upload could not be stored: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message)


@router.post(
    "/{conversation_id}/chat", response_model=ResponseModel[ChatResponse]
)
@inject
async def chat(
    request: ChatRequest,
    conversation_id: str = ConversationIdPath,
    controller: LectureController = Depends(
        Provide[DependencyContainer.controllers.lecture_controller]
    ),
):
    """Send a chat message about a lecture and receive the reply."""
    try:
        result = await controller.chat(
            conversation_id=conversation_id, message=request.message
        )
        return ResponseModel.success(data=result, message="Reply generated")
    except InvalidConversationIdError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except (LectureValidationError, InvalidMessageError) as e:
        raise HTTPException(status_code=422, detail=e.message)
    except StorageUnavailableError as e:
        logger.warning("Chat turn could not be stored: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message)
    except AnswerGenerationError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get(
    "/{conversation_id}/history", response_model=ResponseModel[MessagesResponse]
)
@inject
async def get_history(
    conversation_id: str = ConversationIdPath,
    controller: LectureController = Depends(
        Provide[DependencyContainer.controllers.lecture_controller]
    ),
):
    """Return the full conversation history for a lecture."""
    try:
        result = await controller.get_history(conversation_id=conversation_id)
        return ResponseModel.success(data=result, message="History fetched")
    except InvalidConversationIdError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StorageUnavailableError as e:
        logger.warning("History read failed: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message)
