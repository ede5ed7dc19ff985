from functools import lru_cache
import os
import secrets
from typing import Annotated, Any, Literal
import warnings

from pydantic import (
    AnyUrl,
    BeforeValidator,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum recommended length for SECRET_KEY in characters
MIN_SECRET_KEY_LENGTH = 32


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Chat API"
    DEBUG: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    FRONTEND_URL: str = "http://localhost:5173"

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        """Return all CORS origins as strings."""
        origins = [str(origin).rstrip("/") for origin in self.CORS_ORIGINS]
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL.rstrip("/"))
        return origins

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "changethis"
    POSTGRES_DB: str = "chat"

    @field_validator("POSTGRES_PASSWORD", mode="after")
    @classmethod
    def validate_postgres_password(cls, v: str, info: ValidationInfo) -> str:
        """Validate that POSTGRES_PASSWORD is changed in production."""
        env = (
            info.data.get("ENVIRONMENT")
            if info.data
            else os.getenv("ENVIRONMENT", "local")
        )
        if v == "changethis" and env == "production":
            raise ValueError(
                "POSTGRES_PASSWORD must be changed from default value in production. "
                "Set a strong, unique password via the POSTGRES_PASSWORD environment variable."
            )
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> MultiHostUrl:
        """Build PostgreSQL connection URI for SQLAlchemy."""
        return MultiHostUrl.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # JWT Security Settings
    # If SECRET_KEY is not set, a random key is generated (development only)
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate and warn about SECRET_KEY configuration."""
        if not v:
            generated_key = secrets.token_urlsafe(MIN_SECRET_KEY_LENGTH)
            warnings.warn(
                "SECRET_KEY not set! Using a randomly generated key. "
                "This is only suitable for development. "
                "Set SECRET_KEY environment variable in production.",
                UserWarning,
                stacklevel=2,
            )
            return generated_key
        if len(v) < MIN_SECRET_KEY_LENGTH:
            warnings.warn(
                f"SECRET_KEY is shorter than {MIN_SECRET_KEY_LENGTH} characters. "
                "Consider using a longer key for better security.",
                UserWarning,
                stacklevel=2,
            )
        return v

    # Attachment storage (any S3-compatible provider)
    S3_ENDPOINT_URL: str = "http://localhost:8333"
    S3_ACCESS_KEY: str = "any"
    S3_SECRET_KEY: str = "any"
    S3_BUCKET_NAME: str = "chat-attachments"
    S3_PUBLIC_URL: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def s3_public_base_url(self) -> str:
        """Return the public base URL for S3 objects."""
        return self.S3_PUBLIC_URL or self.S3_ENDPOINT_URL

    # Messaging rules
    MESSAGE_DELETE_WINDOW_MINUTES: int = 15
    MAX_ATTACHMENTS_PER_MESSAGE: int = 5
    MAX_ATTACHMENT_SIZE_MB: int = 10
    MESSAGE_RATE_LIMIT: str = "30/minute"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_attachment_size_bytes(self) -> int:
        return self.MAX_ATTACHMENT_SIZE_MB * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
