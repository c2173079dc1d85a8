"""
Configuration management for the Light The Lamp draft bot
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

STORE_BACKENDS = {"api", "memory"}


class TrackerConfig(BaseSettings):
    """Application configuration with environment variable support."""

    # Discord settings
    bot_token: str = ""
    guild_id: Optional[int] = None

    # Database REST API settings (Supabase / PostgREST)
    supabase_url: str = ""
    api_token: str = ""
    rest_path: str = "rest/v1"

    # Store selection - picked explicitly per environment, never on failure
    store_backend: str = "api"
    memberships_table: str = "league_memberships"
    picks_table: str = "picks"

    # Roster data (current game + pickable players)
    roster_path: str = "data/roster.json"

    # API Constants
    default_timeout: int = 10
    connect_timeout: int = 5

    # Discord Limits
    discord_field_value_limit: int = 1024
    autocomplete_limit: int = 25

    # Branding
    embed_color: str = "ce1126"  # Red Wings red
    bot_description: str = "Light The Lamp Draft Bot"

    # Application settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    environment: str = "development"
    testing: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.testing

    @property
    def uses_memory_store(self) -> bool:
        """Check if the in-memory store backend is selected."""
        return self.store_backend.lower() == "memory"

    @property
    def rest_base_url(self) -> str:
        """Full base URL of the REST API (derived value)."""
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/{self.rest_path.strip('/')}"


# Global configuration instance - lazily initialized to avoid import-time errors
_config = None

def get_config() -> TrackerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = TrackerConfig()  # type: ignore
    return _config
