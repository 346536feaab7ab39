"""
Crawler Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    """Crawler settings loaded from environment variables."""

    # Target site
    base_url: str = "https://books.toscrape.com/"
    catalogue_path: str = "catalogue/"
    page_path_template: str = "catalogue/page-{n}.html"
    max_pages: int = 20
    stop_on_empty_page: bool = False

    # Rendering engine: "browser" (Playwright) or "static" (httpx)
    engine: str = "browser"
    headless: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
    )
    blocked_resource_types: List[str] = ["image", "stylesheet", "font", "media"]

    # Navigation
    navigation_timeout_ms: int = 5000
    wait_until: str = "networkidle"

    # Pacing
    item_delay_seconds: float = 0.5
    page_delay_seconds: float = 1.0

    # Retry (one attempt means no retry)
    retry_max_attempts: int = 1
    retry_backoff_seconds: float = 0.0

    # Output
    output_dir: Path = Path("data")

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_progress: bool = False

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, value: str) -> str:
        """Page and catalogue URLs are appended to the base URL."""
        return value if value.endswith("/") else value + "/"

    @property
    def catalogue_url(self) -> str:
        """Base URL that list-page item links are relative to."""
        return self.base_url + self.catalogue_path

    def page_url(self, page_number: int) -> str:
        """Absolute URL of catalogue list page ``page_number`` (1-based)."""
        return self.base_url + self.page_path_template.format(n=page_number)

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path("logs")

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "scraper.log"

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if Path(".env").exists() else None
        env_file_encoding = "utf-8"
        env_prefix = "BOOKSCRAPER_"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
