"""Exceptions for the Lectures feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import LectureChatException


class LectureException(LectureChatException):
    """Base exception for lecture operations."""
    pass


class LectureValidationError(LectureException):
    """Raised when an upload or chat request is rejected."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "LECTURE_VALIDATION_ERROR", details)


class AnswerGenerationError(LectureException):
    """Raised when the answer generator fails to produce a reply."""

    def __init__(self, conversation_id: str, message: str):
        super().__init__(
            f"Answer generation failed for conversation '{conversation_id}': {message}",
            "ANSWER_GENERATION_ERROR",
            {"conversation_id": conversation_id},
        )
