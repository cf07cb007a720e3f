"""Validators for lecture uploads and chat input."""
import logging

from fastapi import UploadFile

from api.features.lectures.exceptions import LectureValidationError

logger = logging.getLogger(__name__)


class LectureValidator:
    SUPPORTED_EXTENSIONS = (".txt", ".md")
    SUPPORTED_MIME_TYPES = {
        "text/plain",
        "text/markdown",
        "text/x-markdown",
        "application/octet-stream",
    }

    @classmethod
    async def validate_upload(cls, file: UploadFile, max_bytes: int) -> str:
        """Validate an uploaded lecture and return its text."""
        if not file.filename:
            raise LectureValidationError("No filename provided")

        cls._validate_file_type(file)

        # Read one byte past the limit so oversize uploads are detected
        # without buffering the whole body.
        content = await file.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise LectureValidationError(
                f"File too large (limit {max_bytes} bytes)",
                {"limit": max_bytes},
            )

        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError:
            raise LectureValidationError("Lecture must be UTF-8 text") from None

        if not text.strip():
            raise LectureValidationError("Lecture is empty")
        return text

    @classmethod
    def _validate_file_type(cls, file: UploadFile) -> None:
        filename = file.filename.lower()
        if not filename.endswith(cls.SUPPORTED_EXTENSIONS):
            raise LectureValidationError(
                f"Unsupported file type: {file.filename}",
                {"supported": list(cls.SUPPORTED_EXTENSIONS)},
            )

        content_type = (file.content_type or "").split(";")[0].strip()
        if content_type and content_type not in cls.SUPPORTED_MIME_TYPES:
            logger.warning(
                "Unexpected MIME type %s for %s", content_type, file.filename
            )
            raise LectureValidationError(f"Unsupported MIME type: {content_type}")

    @staticmethod
    def validate_chat_message(message: str) -> str:
        """Strip a chat message and reject it if nothing is left."""
        text = (message or "").strip()
        if not text:
            raise LectureValidationError("Message must not be empty")
        return text
