"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict

from runlog.shared.exceptions import ConfigError

# Project root: runlog/
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(
        default="development",
        description="Deployment environment (development/production)"
    )

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./runlog.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret"),
    )
    strava_redirect_uri: Optional[str] = Field(default=None)
    strava_scopes: str = Field(default="read,activity:read_all")
    strava_oauth_state: str = Field(
        default="runlog",
        description="Opaque state echoed back by Strava on the OAuth callback"
    )
    strava_timeout_seconds: float = Field(
        default=20.0,
        description="Timeout for every outbound Strava HTTP call"
    )

    # === Admin ===
    admin_key: Optional[str] = Field(
        default=None,
        description="Bearer secret for admin endpoints"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def require_strava_client(self) -> tuple[str, str]:
        """Return (client_id, client_secret) or raise ConfigError."""
        if not self.strava_client_id or not self.strava_client_secret:
            raise ConfigError("Missing STRAVA_CLIENT_ID or STRAVA_CLIENT_SECRET")
        return self.strava_client_id, self.strava_client_secret

    def require_admin_key(self) -> str:
        """Return the admin bearer secret or raise ConfigError."""
        if not self.admin_key:
            raise ConfigError("Missing ADMIN_KEY")
        return self.admin_key

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
