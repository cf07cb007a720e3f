"""Router for the Conversation feature."""
import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path

from di.container import ApplicationContainer as DependencyContainer
from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import (
    AppendMessageRequest,
    MessageDTO,
    MessagesResponse,
)
from api.features.conversation.exceptions import (
    InvalidConversationIdError,
    InvalidMessageError,
    StorageUnavailableError,
)
from api.shared.dtos import HealthCheckResponse
from api.shared.response import ResponseModel

router = APIRouter()
logger = logging.getLogger("lecture_chat.conversation.router")

ConversationIdPath = Path(
    ..., min_length=1, max_length=128, description="Conversation identifier"
)


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    return ResponseModel.success(
        data=HealthCheckResponse(status="healthy", dependencies={"database": "ok"}),
        message="Conversation service is healthy",
    )


@router.get(
    "/{conversation_id}/messages", response_model=ResponseModel[MessagesResponse]
)
@inject
async def get_messages(
    conversation_id: str = ConversationIdPath,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
):
    try:
        result = await controller.get_messages(conversation_id=conversation_id)
        return ResponseModel.success(data=result, message="Messages fetched")
    except InvalidConversationIdError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StorageUnavailableError as e:
        logger.warning("History read failed: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message)


@router.post("/{conversation_id}/messages", response_model=ResponseModel[MessageDTO])
@inject
async def append_message(
    request: AppendMessageRequest,
    conversation_id: str = ConversationIdPath,
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
):
    try:
        msg = await controller.append_message(
            conversation_id=conversation_id, request=request
        )
        return ResponseModel.success(data=msg, message="Message appended")
    except InvalidConversationIdError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except InvalidMessageError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except StorageUnavailableError as e:
        logger.warning("Append failed: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message)
