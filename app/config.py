# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Every tunable of the API and the worker, read once from the environment
# (or .env) by pydantic-settings. Blank values fall back to the defaults.
#
# Usage:
#   from app.config import settings
#   settings.MAX_IMAGES_PER_ITEM
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_EMAIL_DOMAINS = (
    "gmail.com,outlook.com,hotmail.com,yahoo.com,live.com,"
    "ltce.in,vjti.ac.in,spit.ac.in,tsec.edu,djsce.ac.in,"
    "somaiya.edu,crce.ac.in,siesgst.ac.in,rait.ac.in,"
    "dmce.ac.in,pce.ac.in,ternaengg.ac.in,"
    "shahandanchor.com,vomgce.org.in"
)


class Settings(BaseSettings):
    """LearnConnect configuration. Import the `settings` instance, not this class."""

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Required; startup fails without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for password sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        ...,
        description="Legacy HS256 JWT secret for verifying access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Content Sources
    # -------------------------------------------------------------------------
    # Google Sheets is optional - leave blank to disable

    GOOGLE_SHEET_ID: str = Field(
        default="",
        description="Spreadsheet ID holding MAIN_DATA / VIDEOS_DATA / IMPORTANT_LINKS"
    )

    GOOGLE_API_KEY: str = Field(
        default="",
        description="API key for the Sheets values endpoint"
    )

    CONTENT_CATALOG_PATH: str = Field(
        default="",
        description="Optional path to a static JSON subject catalog"
    )

    CONTENT_CACHE_TTL_SECONDS: int = Field(
        default=300,
        ge=0,
        description="How long a year/branch/semester catalog stays cached"
    )

    GITHUB_REPOSITORY: str = Field(
        default="MinavKaria/LearnConnect",
        description="owner/name of the repository whose contributors are listed"
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for outbound HTTP calls (Sheets, GitHub, JWKS)"
    )

    # -------------------------------------------------------------------------
    # Marketplace Settings
    # -------------------------------------------------------------------------

    MARKETPLACE_CACHE_TTL_SECONDS: int = Field(
        default=300,
        ge=0,
        description="How long the unfiltered item listing stays cached"
    )

    MAX_IMAGE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum size of a single item image in MB"
    )

    MAX_IMAGES_PER_ITEM: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of images per listing"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.webp",
        description="Allowed image extensions (comma-separated)"
    )

    MARKETPLACE_BRAND: str = Field(
        default="LearnConnect",
        description="Name used in the WhatsApp contact message"
    )

    WHATSAPP_COUNTRY_CODE: str = Field(
        default="91",
        description="Country code prefixed to seller phone numbers"
    )

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    ALLOWED_EMAIL_DOMAINS: str = Field(
        default=DEFAULT_EMAIL_DOMAINS,
        description="Email domains accepted at registration (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="DEBUG logging in API and worker, auto-reload under python -m app.main"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_EXTENSIONS string into a list.

        Example: ".jpg, .PNG" -> [".jpg", ".png"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(",") if ext.strip()]

    @property
    def allowed_email_domains_list(self) -> list[str]:
        return [d.strip().lower() for d in self.ALLOWED_EMAIL_DOMAINS.split(",") if d.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def sheets_enabled(self) -> bool:
        """Sheets is only queried when both the sheet id and key are set."""
        return bool(self.GOOGLE_SHEET_ID and self.GOOGLE_API_KEY)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Parsed once per process."""
    return Settings()


settings = get_settings()
