"""Application configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PersistenceBackend = Literal["supabase", "local", "memory"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Only the Supabase credentials are required, and only when the
    ``supabase`` persistence backend is selected.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="onboarding-backend", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Persistence
    persistence_backend: PersistenceBackend = Field(
        default="local",
        description="Where snapshots, records and uploads live (supabase/local/memory)",
    )
    local_data_dir: str = Field(default="./data", description="Directory for the local backend")
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_secret_key: str = Field(default="", description="Supabase secret key for backend operations")
    kv_table_name: str = Field(default="kv_store", description="Supabase table backing the keyed store")
    documents_bucket: str = Field(default="onboarding-documents", description="Storage bucket for uploads")

    # Wizard
    snapshot_key_prefix: str = Field(default="onboarding_data", description="Key prefix for wizard snapshots")
    default_company_name: str = Field(
        default="Waldhauser Sanitär & Heizung",
        description="Company name prefilled in a fresh snapshot",
    )

    # OpenAI
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI model to use for the assistant")
    chat_history_limit: int = Field(default=10, description="Max prior messages sent to the assistant")
    mock_openai: bool | None = Field(
        default=None,
        description="Answer chat with canned replies instead of OpenAI. Auto-enabled outside production.",
    )

    # Uploads and request limits
    max_upload_size_bytes: int = Field(default=10 * 1024 * 1024, description="Max document size (10 MiB)")
    max_request_body_size: int = Field(default=15 * 1024 * 1024, description="Max request body size in bytes")

    # Submission transport
    form_relay_url: str = Field(default="", description="Form relay endpoint receiving the final submission")
    form_relay_timeout_seconds: float = Field(default=30.0, description="Timeout for the form relay call")
    submission_attachment_format: Literal["markdown", "pdf"] = Field(
        default="markdown",
        description="Format of the report attached to the submission",
    )

    # Admin dashboard (placeholder credential check, not a real auth provider)
    admin_username: str = Field(default="PISTA", description="Admin dashboard username")
    admin_password: str = Field(default="admin", description="Admin dashboard password")
    admin_token_secret: str = Field(default="change-me", description="HS256 secret for admin tokens")
    admin_token_ttl_seconds: int = Field(default=8 * 3600, description="Admin token lifetime in seconds")

    # Session
    session_cookie_name: str = Field(default="onboarding_session", description="Session cookie name")
    session_cookie_max_age: int = Field(default=2592000, description="Session cookie max age in seconds (30 days)")
    session_cookie_secure: bool = Field(default=True, description="Use secure cookies (HTTPS only)")

    @model_validator(mode="after")
    def set_mock_openai_default(self) -> "Settings":
        """Default mock_openai from the environment when MOCK_OPENAI is unset.

        Production never mocks unless told to. Without an API key there is
        nothing to call, so the canned replies are used as well.
        """
        if self.mock_openai is None:
            self.mock_openai = not self.is_production or not self.openai_api_key
        return self

    @model_validator(mode="after")
    def check_supabase_credentials(self) -> "Settings":
        """Require Supabase credentials when the supabase backend is selected."""
        if self.persistence_backend == "supabase" and not (self.supabase_url and self.supabase_secret_key):
            raise ValueError("SUPABASE_URL and SUPABASE_SECRET_KEY are required for the supabase backend")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def uses_supabase(self) -> bool:
        """Check whether records and blobs go to Supabase."""
        return self.persistence_backend == "supabase"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
