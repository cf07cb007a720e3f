from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=True)


class PgDbSettings(CustomSettings):
    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="lectures")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: PostgresDsn | str = Field(default="")
    # Migrations stay canonical; this only covers local runs without alembic.
    AUTO_CREATE_SCHEMA: bool = Field(default=True)

    @model_validator(mode="before")
    def validate_postgres_dsn(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            _built_uri = PostgresDsn.build(
                scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                username=data.get("POSTGRES_USER", "postgres"),
                password=data.get("POSTGRES_PASSWORD", "postgres"),
                host=data.get("POSTGRES_HOST", "localhost"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB", "lectures"),
            ).unicode_string()
            data["DATABASE_URL"] = _built_uri
        return data


class ConversationSettings(CustomSettings):
    """Configuration for the conversation store.

    Set via env vars:
    - MAX_MESSAGE_LENGTH (unset means unbounded)
    - CONVERSATION_ID_PREFIX
    - MAX_CONVERSATION_ID_LENGTH
    - MAX_CACHED_HISTORIES
    """

    MAX_MESSAGE_LENGTH: Optional[int] = Field(default=None, ge=1)
    ID_PREFIX: str = Field(default="lec-", alias="CONVERSATION_ID_PREFIX")
    MAX_ID_LENGTH: int = Field(
        default=128, ge=1, le=128, alias="MAX_CONVERSATION_ID_LENGTH"
    )
    MAX_CACHED_HISTORIES: int = Field(default=1024, ge=1)


class CredentialSettings(CustomSettings):
    """Configuration for password hashing.

    Set via env vars:
    - PASSWORD_HASH_ITERATIONS
    - PASSWORD_SALT_BYTES
    - PASSWORD_HASH_BYTES
    """

    PASSWORD_HASH_ITERATIONS: int = Field(default=100_000, ge=1)
    PASSWORD_SALT_BYTES: int = Field(default=16, ge=1)
    PASSWORD_HASH_BYTES: int = Field(default=32, ge=1)


class LectureSettings(CustomSettings):
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024)


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: PgDbSettings = Field(default_factory=PgDbSettings)
    CONVERSATION: ConversationSettings = Field(default_factory=ConversationSettings)
    CREDENTIALS: CredentialSettings = Field(default_factory=CredentialSettings)
    LECTURES: LectureSettings = Field(default_factory=LectureSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
