"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class PlatformProfile(BaseModel):
    """
    Execution limits of one hosting target.

    Attributes:
        name: Profile identifier ("server" or "function").
        deadline_seconds: Internal timeout for the upstream call.
        ceiling_seconds: Hard execution limit enforced by the platform.
        max_document_bytes: Largest accepted decoded document size.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    deadline_seconds: float = Field(..., gt=0)
    ceiling_seconds: float = Field(..., gt=0)
    max_document_bytes: int = Field(..., gt=0)

    @model_validator(mode="after")
    def check_deadline_margin(self) -> "PlatformProfile":
        """The deadline must leave a margin below the platform ceiling."""
        if self.deadline_seconds >= self.ceiling_seconds:
            raise ValueError(
                f"Deadline {self.deadline_seconds}s must be below the "
                f"{self.ceiling_seconds}s platform limit for profile '{self.name}'"
            )
        return self

    @property
    def deadline_margin(self) -> float:
        return self.ceiling_seconds - self.deadline_seconds


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load from .env file in the relay package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
        frozen=True,
    )

    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = Field(default=4096, gt=0)

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: str = "*"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: str = "INFO"

    # Platform limits (Heroku router: 30s, Netlify functions: 10s)
    server_deadline_seconds: float = 28.0
    server_ceiling_seconds: float = 30.0
    server_max_document_bytes: int = 50 * MIB
    function_deadline_seconds: float = 9.5
    function_ceiling_seconds: float = 10.0
    function_max_document_bytes: int = 6 * MIB

    @property
    def api_configured(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def cors_origins(self) -> list[str]:
        """Origins allowed for cross-origin requests, parsed from a comma list."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]

    def profile(self, name: str) -> PlatformProfile:
        """
        Build the platform profile for a hosting target.

        Args:
            name: "server" for the long-running process, "function" for
                serverless invocations.

        Raises:
            ValueError: If the name is unknown or the deadline leaves no margin.
        """
        if name not in ("server", "function"):
            raise ValueError(f"Unknown platform profile: {name}")
        return PlatformProfile(
            name=name,
            deadline_seconds=getattr(self, f"{name}_deadline_seconds"),
            ceiling_seconds=getattr(self, f"{name}_ceiling_seconds"),
            max_document_bytes=getattr(self, f"{name}_max_document_bytes"),
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
