import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.features.conversation.exceptions import (
    InvalidConversationIdError,
    StorageUnavailableError,
)
from api.features.lectures.exceptions import AnswerGenerationError
from api.shared.dtos import ErrorResponse
from api.shared.entities.registry import BaseEntity
from api.shared.exceptions import LectureChatException
from core.logging_config import configure_logging
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer

configure_logging(SETTINGS.APP)

logger = logging.getLogger("lecture_chat")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        async with db_resource.engine.begin() as _conn:
            await _conn.execute(text("SELECT 1"))
        if SETTINGS.DATABASE.AUTO_CREATE_SCHEMA:
            await db_resource.create_schema(BaseEntity)
        logger.info(
            f"Database connection established in {time.time() - db_start:.2f}s"
        )
        logger.info(
            f"Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"Failed to initialize application: {str(e)}")
        raise

    yield

    # Let admitted appends finish before the engine goes away.
    store = _app.container.services.conversation_store()
    await store.drain()
    db_resource = _app.container.infrastructure.database()
    await db_resource.shutdown()
    logger.info("Application shutdown complete")


def create_fastapi_app() -> CustomFastAPI:
    origins = {
        "*",
        "http://localhost",
        "http://localhost:*",
        "http://localhost:3000",
        "http://localhost:8000",
    }

    _app = CustomFastAPI(
        title="Lecture Chat API",
        description="Chat with an assistant about an uploaded lecture",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.config.from_dict(SETTINGS.model_dump())
    _app.container.wire(modules=[sys.modules[__name__]])

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.conversation.router import router as conversation_router
    from api.features.lectures.router import router as lectures_router

    _app.include_router(
        lectures_router, prefix="/api/v1/lectures", tags=["Lectures"]
    )
    _app.include_router(
        conversation_router, prefix="/api/v1/conversations", tags=["Conversations"]
    )

    return _app


app = create_fastapi_app()


@app.get("/")
async def root():
    return {"message": "Lecture Chat API is running", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "ok"}


def status_code_for(exc: LectureChatException) -> int:
    if isinstance(exc, StorageUnavailableError):
        return 503
    if isinstance(exc, InvalidConversationIdError):
        return 400
    if isinstance(exc, AnswerGenerationError):
        return 502
    if exc.retryable:
        return 503
    return 422


@app.exception_handler(LectureChatException)
async def lecture_chat_exception_handler(request: Request, exc: LectureChatException):
    body = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        retryable=exc.retryable,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status_code_for(exc), content=body.model_dump(mode="json")
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "detail": f"{exc.detail} : {request.url}",
            "status_code": 404,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 422},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "status_code": 500,
        },
    )
