"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "MockView"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Ollama generation backend
    ollama_host: str = "http://localhost:11434"
    ollama_model_light: str = "llama3.1:8b-instruct-q8_0"
    ollama_model_heavy: str = "llama3.1:70b-instruct-q4_K_M"
    generation_timeout_seconds: float = Field(default=300.0, gt=0)
    generation_max_retries: int = Field(default=3, ge=1)
    generation_backoff_base_seconds: float = Field(default=1.0, ge=0)
    malformed_output_retries: int = Field(default=3, ge=1)
    generation_temperature: float = 0.7
    generation_max_tokens: int = 4096

    # Langfuse tracing of backend calls
    langfuse_enabled: bool = False
    langfuse_public_key: str | None = None
    langfuse_secret_key: str | None = None
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # Interview settings
    max_follow_up_depth: int = Field(default=3, ge=0)
    max_questions: int = Field(default=15, ge=1)
    max_duration_minutes: int = Field(default=45, ge=1)
    enforce_duration_cap: bool = False  # Wall-clock cap is opt-in
    minutes_per_question: int = 4

    # Development
    mock_ai_services: bool = False  # Local deterministic generation, no backend

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
