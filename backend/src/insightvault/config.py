"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "InsightVault"
    debug: bool = False

    # Local store
    storage_backend: Literal["sqlite", "firestore", "memory"] = "sqlite"
    sqlite_path: str = ".insightvault/insightvault.db"

    # Firebase/GCP (storage_backend=firestore)
    gcp_project_id: str = ""
    use_firebase_emulator: bool = False
    firestore_emulator_host: str = "localhost:8080"

    # Gemini
    # Either an AI Studio API key, or Vertex AI via project + location
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    use_vertexai: bool = False
    vertex_ai_location: str = "global"
    generation_model: str = "gemini-2.5-flash"
    analysis_temperature: float = 0.3

    # Knowledge base context budget
    kb_max_context_entries: int = 50
    kb_excerpt_chars: int = 300

    # Sessions (in-memory analyzer drafts and conversations)
    session_ttl_minutes: int = 60

    # API
    api_prefix: str = "/api"
    # CORS_ORIGINS_STR env var should be comma-separated list of allowed origins
    cors_origins_str: str = "http://localhost:3000"

    # Rate limiting for endpoints that call the model
    rate_limit_generation: str = "20/minute"

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
