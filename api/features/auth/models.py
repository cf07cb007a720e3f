"""Models for the Auth feature."""
from pydantic import BaseModel, Field


class Credential(BaseModel):
    """Derived password hash and the salt it was derived with, both hex encoded."""

    hash: str = Field(description="Hex-encoded derived key")
    salt: str = Field(description="Hex-encoded salt")

    class Config:
        frozen = True
