"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: backend/
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./randonneurs.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Club ===
    club_name: str = Field(default="Randonneurs Ontario")
    club_timezone: str = Field(
        default="America/Toronto",
        description="Timezone event dates and start times are expressed in"
    )
    default_start_time: str = Field(default="08:00", description="HH:MM")
    current_season: Optional[int] = Field(
        default=None,
        description="Season shown by admin listings; defaults to the current year"
    )

    # === Public URLs ===
    base_url: str = Field(
        default="https://randonneursontario.ca",
        description="Base URL used in submission links"
    )
    site_url: Optional[str] = Field(
        default=None,
        description="Public site URL for calendar links (falls back to base_url)"
    )

    # === Secrets ===
    cron_secret: Optional[str] = Field(
        default=None,
        description="Bearer secret for the scheduled lifecycle trigger"
    )
    admin_api_key: Optional[str] = Field(
        default=None,
        description="Shared key for admin endpoints (X-API-Key header)"
    )

    # === Email (SendGrid v3 API) ===
    sendgrid_api_key: Optional[str] = Field(default=None)
    sendgrid_api_url: str = Field(default="https://api.sendgrid.com/v3/mail/send")
    email_from: str = Field(default="noreply@randonneursontario.ca")
    results_fallback_email: str = Field(
        default="vp-admin@randonneursontario.ca",
        description="Receives ACP result summaries when a chapter has no VP email"
    )

    # === Uploads ===
    storage_dir: Path = Field(default=PROJECT_ROOT / "storage" / "rider-submissions")
    storage_public_url: str = Field(default="/files/rider-submissions")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)

    # === Route planning service ===
    rwgps_base_url: str = Field(default="https://ridewithgps.com")

    # === Control cards ===
    extra_blank_cards: int = Field(
        default=0,
        ge=0,
        description="Blank cards added for day-of registrations"
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
    def public_site_url(self) -> str:
        return (self.site_url or self.base_url).rstrip("/")

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
