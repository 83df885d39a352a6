"""
NEST Configuration Module.

Handles application settings, feature flags, and mock backend configuration.
Uses pydantic-settings for validation and type safety.

Mock mode is the default: all persistence goes through the in-memory
Supabase substitute in nest.core.mock_client.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    """Feature flags for enabling/disabling modules."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    trips: bool = True
    itinerary: bool = True
    collaborators: bool = True
    comments: bool = True
    media: bool = True

    def to_dict(self) -> dict[str, bool]:
        """Return feature flags as dictionary for health endpoint."""
        return {
            "trips": self.trips,
            "itinerary": self.itinerary,
            "collaborators": self.collaborators,
            "comments": self.comments,
            "media": self.media,
        }


class SupabaseSettings(BaseSettings):
    """Supabase configuration (only used when mock mode is off)."""

    model_config = SettingsConfigDict(env_prefix="SUPABASE_")

    url: str = Field(default="https://demo.supabase.co", description="Supabase project URL")
    anon_key: str = Field(default="demo-anon-key", description="Supabase anonymous key")
    service_role_key: str = Field(default="demo-service-role-key", description="Supabase service role key")
    mock_mode: bool = Field(
        default=True,
        description="If true, use the in-memory mock client instead of a real Supabase project.",
    )


class MockSettings(BaseSettings):
    """In-memory backend emulation settings."""

    model_config = SettingsConfigDict(env_prefix="MOCK_")

    latency_ms: int = Field(default=0, ge=0, description="Simulated network delay per query/auth call")
    session_file: str = Field(
        default=".nest/session.json",
        description="Local snapshot file for the active session. Empty string disables persistence.",
    )
    seed_demo_user: bool = Field(default=True, description="Seed the demo profile on client creation")
    demo_user_id: str = Field(default="user-123-mock")
    demo_user_email: str = Field(default="demo@nest.app")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Nested settings
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    mock: MockSettings = Field(default_factory=MockSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
