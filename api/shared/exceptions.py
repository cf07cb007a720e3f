"""Shared exceptions for the Lecture Chat API."""
from typing import Any, Dict, Optional

class LectureChatException(Exception):
    """Base exception for Lecture Chat API.

    ``retryable`` tells callers whether the same request may succeed later
    (transient infrastructure faults) or will keep failing (bad input).
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)
