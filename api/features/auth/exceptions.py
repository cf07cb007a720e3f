"""Exceptions for the Auth feature."""
from api.shared.exceptions import LectureChatException


class CredentialException(LectureChatException):
    """Base exception for credential hashing."""
    pass


class InvalidInputError(CredentialException):
    """Raised when no usable password was supplied."""

    def __init__(self, message: str = "Password is required"):
        super().__init__(message, "INVALID_INPUT")


class InvalidSaltError(CredentialException):
    """Raised when a supplied salt is not valid hex."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid salt: {reason}", "INVALID_SALT", {"reason": reason})
