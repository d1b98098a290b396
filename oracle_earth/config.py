"""Oracle Earth configuration settings using Pydantic.

Values come from ``ORACLE_*`` environment variables or a ``.env`` file.
Construct :class:`OracleSettings` once at process start and hand it to
the components that need it.
"""

from pathlib import Path

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER_KEYS = {"", "demo-key"}


class OracleSettings(BaseSettings):
    """Central configuration for the Oracle Earth application."""

    model_config = SettingsConfigDict(
        env_prefix="ORACLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # --- Project Paths ---
    @computed_field
    @property
    def project_root(self) -> Path:
        """Root directory of the project."""
        return Path(__file__).parent.parent

    # --- LLM Configuration (OpenRouter-compatible gateway) ---
    llm_api_key: str = Field(default="")
    llm_base_url: str = Field(default="https://openrouter.ai/api/v1")
    llm_model: str = Field(default="openai/gpt-oss-20b:free")
    llm_fallback_models: str = (
        "x-ai/grok-4-fast:free,meta-llama/llama-3.2-3b-instruct:free,google/gemma-2-9b-it:free"
    )
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout: int = 30
    llm_referer: str = "https://oracle-earth.vercel.app"
    llm_app_title: str = "Oracle Earth - AI Brain of Our Planet"

    # --- Storage ---
    database_path: str = "oracle-earth.db"

    # --- API Settings ---
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:3000"  # Comma-separated string

    # --- Logging ---
    log_level: str = "INFO"
    log_file: str | None = None

    # --- Time Machine ---
    min_year: int = 1990
    max_year: int = 2050
    present_year: int = 2024
    playback_interval_ms: int = Field(default=200, gt=0)

    # --- Crisis Feed ---
    feed_interval_ms: int = Field(default=5000, gt=0)
    feed_event_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    feed_capacity: int = Field(default=10, ge=1)
    feed_initial_events: int = Field(default=5, ge=0)

    # --- What-If Simulator ---
    analysis_delay_seconds: float = Field(default=2.0, ge=0.0)

    @model_validator(mode="after")
    def _check_year_range(self) -> "OracleSettings":
        if self.min_year > self.max_year:
            raise ValueError("min_year must not exceed max_year")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def llm_fallback_model_list(self) -> list[str]:
        """Parse comma-separated fallback model ids."""
        return [m.strip() for m in self.llm_fallback_models.split(",") if m.strip()]

    @property
    def llm_configured(self) -> bool:
        return self.llm_api_key.strip() not in _PLACEHOLDER_KEYS

    @property
    def database_file(self) -> Path:
        path = Path(self.database_path)
        if self.database_path == ":memory:" or path.is_absolute():
            return path
        return self.project_root / path


_config: OracleSettings | None = None


def get_config() -> OracleSettings:
    """Get or create the process-wide settings instance."""
    global _config
    if _config is None:
        _config = OracleSettings()
    return _config


def reload_config() -> OracleSettings:
    """Drop the cached settings and read them again."""
    global _config
    _config = None
    return get_config()
