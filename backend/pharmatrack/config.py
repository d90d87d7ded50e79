"""Application configuration via Pydantic Settings."""

from typing import List
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./pharmatrack.db"

    @model_validator(mode="after")
    def fix_database_url(self) -> "Settings":
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://"""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            self.DATABASE_URL = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            self.DATABASE_URL = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return self

    # App
    DEBUG: bool = False

    # ScraperAPI fetch proxy (required for PROXY_DOMAINS)
    SCRAPER_API_KEY: str = ""
    SCRAPER_API_URL: str = "http://api.scraperapi.com"
    SCRAPER_API_COUNTRY: str = "ro"
    PROXY_DOMAINS: str = "drmax.ro"  # Comma-separated list of domains that block direct fetches

    # Fetching
    FETCH_TIMEOUT_SECONDS: float = 30.0
    PROXY_TIMEOUT_SECONDS: float = 60.0
    RETRY_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 2.0

    # Politeness delay between targets
    REQUEST_DELAY_MIN_SECONDS: float = 2.0
    REQUEST_DELAY_MAX_SECONDS: float = 5.0

    # Consecutive failures before a URL is deactivated
    FAILURE_THRESHOLD: int = 3

    # Scheduler
    SCRAPE_CRON: str = "0 6 * * *"

    @model_validator(mode="after")
    def check_scrape_policy(self) -> "Settings":
        """Reject policy values the orchestrator cannot honour."""
        if self.REQUEST_DELAY_MIN_SECONDS < 0:
            raise ValueError("REQUEST_DELAY_MIN_SECONDS must be >= 0")
        if self.REQUEST_DELAY_MIN_SECONDS > self.REQUEST_DELAY_MAX_SECONDS:
            raise ValueError("REQUEST_DELAY_MIN_SECONDS must not exceed REQUEST_DELAY_MAX_SECONDS")
        if self.RETRY_ATTEMPTS < 1:
            raise ValueError("RETRY_ATTEMPTS must be >= 1")
        if self.FAILURE_THRESHOLD < 1:
            raise ValueError("FAILURE_THRESHOLD must be >= 1")
        return self

    def get_proxy_domains(self) -> List[str]:
        """Parse PROXY_DOMAINS into a list of bare domains.

        Returns:
            Lower-cased domains without a ``www.`` prefix, empty if unset
        """
        if not self.PROXY_DOMAINS:
            return []
        domains = []
        for d in self.PROXY_DOMAINS.split(","):
            d = d.strip().lower()
            if d.startswith("www."):
                d = d[4:]
            if d:
                domains.append(d)
        return domains


settings = Settings()
