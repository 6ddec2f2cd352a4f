import logging
from typing import Optional

import httpx
from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # O2CM Entries Site
    base_url: HttpUrl = Field(
        "https://entries.o2cm.com/", description="Root URL of the O2CM entries site."
    )
    entries_endpoint: str = Field(
        "default.asp", description="Endpoint receiving the per-competitor POST."
    )
    competitor_select_id: str = Field(
        "selEnt", description="id of the <select> listing competitor entries."
    )

    # HTTP Client
    request_timeout: float = Field(
        30.0, gt=0, description="Per-request timeout in seconds."
    )
    max_request_attempts: int = Field(
        4, ge=1, description="Total attempts per request (first try + retries)."
    )
    request_delay_seconds: float = Field(
        0.05,
        ge=0,
        description="Pause between competitor requests, to go easy on the server.",
    )
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
        description="User-Agent header sent with every request.",
    )

    # Output
    output_file: str = Field(
        "events.txt", description="Plain-text report file, overwritten each run."
    )
    merge_partner_events: bool = Field(
        False,
        description="Union event lists of duplicate partnerships instead of keeping the first seen.",
    )
    save_raw_responses: bool = Field(
        False, description="Dump every fetched competitor page for debugging."
    )
    raw_response_dir: str = Field(
        "raw_responses", description="Directory for raw competitor page dumps."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: Optional[str] = Field(
        None, description="Optional path of a rotating log file."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def landing_url(self) -> str:
        return str(self.base_url)

    @property
    def entries_url(self) -> str:
        return str(httpx.URL(self.landing_url).join(self.entries_endpoint))


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
