from __future__ import annotations

from uuid import UUID

from pydantic import Field, PostgresDsn, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingRequiredSettingsError(Exception):
    """Raised when required settings are missing."""

    def __init__(self, missing_fields: list[str]) -> None:
        """Initialize with list of missing field names."""
        self.missing_fields = missing_fields
        super().__init__(f"Missing required environment variables: {', '.join(missing_fields)}")


class InvalidSettingsError(Exception):
    """Raised when settings are invalid."""

    def __init__(self, invalid_fields: list[tuple[str, str]]) -> None:
        """Initialize with list of invalid field names and messages."""
        self.invalid_fields = invalid_fields
        summary = ", ".join(f"{field}: {message}" for field, message in invalid_fields)
        super().__init__(f"Invalid environment variables: {summary}")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required environment variables
    openai_api_key: str = Field(..., description="OpenAI API key (required)")

    # Postgres components; required unless DATABASE_URL is provided
    postgres_user: str | None = Field(default=None, description="Postgres user")
    postgres_password: str | None = Field(default=None, description="Postgres password")
    postgres_host: str | None = Field(default=None, description="Postgres host")
    postgres_port: int | None = Field(default=None, description="Postgres port")
    postgres_db: str | None = Field(default=None, description="Postgres database name")

    database_url: PostgresDsn | None = Field(
        default=None,
        description="Database connection URL",
    )
    rate_limit_storage_url: str = Field(
        default="memory://",
        description="Rate limit storage URL",
    )

    @model_validator(mode="after")
    def build_database_url(self) -> Settings:
        """Build the database URL from components when missing."""
        if self.database_url is not None:
            return self
        components = {
            "POSTGRES_USER": self.postgres_user,
            "POSTGRES_PASSWORD": self.postgres_password,
            "POSTGRES_HOST": self.postgres_host,
            "POSTGRES_PORT": self.postgres_port,
            "POSTGRES_DB": self.postgres_db,
        }
        missing = [name for name, value in components.items() if value is None]
        if missing:
            raise MissingRequiredSettingsError(missing)
        self.database_url = PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=self.postgres_user,
            password=self.postgres_password,
            host=self.postgres_host,
            port=self.postgres_port,
            path=self.postgres_db,
        )
        return self

    # Optional environment variables (defaults provided)
    app_name: str = "semantic-chat-api"
    environment: str = "local"
    log_level: str = "INFO"

    bot_user_id: UUID = UUID("54296b9b-091e-4a19-b5b9-b890c24c1912")
    embedding_model: str = "text-embedding-3-large"
    chat_model: str = "gpt-4-turbo-preview"
    # Passed to match_all_content as-is; see DESIGN.md on its semantics.
    match_threshold: float = 1.0
    match_count: int = Field(default=5, ge=1)


def validate_settings() -> Settings:
    """Validate settings and raise exception for missing required fields.

    Raises:
        MissingRequiredSettingsError: If required environment variables are missing
        InvalidSettingsError: If values fail validation
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except MissingRequiredSettingsError:
        raise
    except ValidationError as e:
        missing_fields: list[str] = []
        for error in e.errors():
            if error["type"] == "missing":
                field_name = error["loc"][0] if error["loc"] else "unknown"
                missing_fields.append(str(field_name).upper())

        if missing_fields:
            raise MissingRequiredSettingsError(missing_fields) from e

        invalid_fields: list[tuple[str, str]] = []
        for error in e.errors():
            field_path = ".".join(str(part) for part in error.get("loc", []))
            message = error.get("msg", "Invalid value")
            invalid_fields.append((field_path or "unknown", message))

        if invalid_fields:
            raise InvalidSettingsError(invalid_fields) from e

        raise


# Validate settings at import time.
# Exceptions will propagate to the importing module (e.g., app/main.py)
settings = validate_settings()
