"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "links-signaling"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8081
    log_level: str = "INFO"
    json_logs: bool = False

    # LiveKit
    livekit_url: str = "http://localhost:7880"  # Administrative API
    livekit_ws_url: str = "ws://localhost:7880"  # Handed to joining clients
    livekit_api_key: str = "devkey"
    livekit_api_secret: str = "secret"

    # Grants
    default_room_name: str = "default-room"
    token_ttl_hours: int = 24

    # Rooms
    room_empty_timeout: int = 300  # Seconds before an empty room closes
    room_max_participants: int = 50

    # CORS
    cors_origins: list[str] = ["*"]

    @model_validator(mode="after")
    def validate_required_settings(self):
        """Validate required settings are present."""
        errors = []

        if not self.livekit_url:
            errors.append("LIVEKIT_URL is required")
        if not self.livekit_ws_url:
            errors.append("LIVEKIT_WS_URL is required")
        if not self.livekit_api_key:
            errors.append("LIVEKIT_API_KEY is required")
        if not self.livekit_api_secret:
            errors.append("LIVEKIT_API_SECRET is required")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
