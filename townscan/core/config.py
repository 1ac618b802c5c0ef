"""Application configuration using Pydantic Settings."""

import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from townscan.core.constants import (
    DEFAULT_CHECKPOINT_EVERY,
    DEFAULT_MIN_CONTENT_CHARS,
    DEPARTMENT_PATTERNS,
    EMBEDDING_TOKEN_LIMIT,
    SAFETY_OVERLAP_TOKENS,
    SKIP_URL_PATTERNS,
    TITLE_DEPARTMENT_PATTERNS,
)


class CrawlConfig(BaseModel):
    """Read-only inputs for a single crawl run."""

    seed_urls: list[str]
    allowed_domains: list[str]
    site_name: str = ""
    max_depth: int = 5
    max_pages: int = 500
    crawl_delay_seconds: float = 1.0
    max_retries: int = 3
    fetch_timeout: float = 30.0
    robots_timeout: float = 10.0
    user_agent: str = "TownScan/1.0"
    checkpoint_every: int = DEFAULT_CHECKPOINT_EVERY
    min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS
    skip_patterns: list[re.Pattern] = Field(default_factory=lambda: list(SKIP_URL_PATTERNS))
    department_patterns: list[tuple[re.Pattern, str]] = Field(
        default_factory=lambda: list(DEPARTMENT_PATTERNS)
    )
    title_department_patterns: list[tuple[re.Pattern, str]] = Field(
        default_factory=lambda: list(TITLE_DEPARTMENT_PATTERNS)
    )
    output_file: Path = Path("data/scraped-data.json")
    progress_file: Path = Path("data/scrape-progress.json")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "dev"

    # Site
    seed_urls: list[str] = ["https://www.needhamma.gov"]
    allowed_domains: list[str] = ["www.needhamma.gov", "needhamma.gov"]
    site_name: str = "Needham"

    # Crawling
    max_depth: int = 5
    max_pages: int = 500
    crawl_delay_seconds: float = 1.0
    max_retries: int = 3
    fetch_timeout: float = 30.0
    robots_timeout: float = 10.0
    user_agent: str = "TownScan/1.0 (community civic tool)"
    checkpoint_every: int = DEFAULT_CHECKPOINT_EVERY
    min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS

    # Storage
    output_file: str = "data/scraped-data.json"
    progress_file: str = "data/scrape-progress.json"
    fragments_file: str = "data/fragments.jsonl"
    manifest_file: str = "data/content-manifest.json"

    # Chunking
    embedding_model: str = "text-embedding-3-small"
    embedding_token_limit: int = EMBEDDING_TOKEN_LIMIT
    safety_overlap_tokens: int = SAFETY_OVERLAP_TOKENS

    # Logging
    log_level: str = "INFO"

    def crawl_config(
        self,
        max_pages: Optional[int] = None,
        max_depth: Optional[int] = None,
    ) -> CrawlConfig:
        """Build the per-run crawl inputs, applying CLI overrides."""
        return CrawlConfig(
            seed_urls=list(self.seed_urls),
            allowed_domains=list(self.allowed_domains),
            site_name=self.site_name,
            max_depth=self.max_depth if max_depth is None else max_depth,
            max_pages=self.max_pages if max_pages is None else max_pages,
            crawl_delay_seconds=self.crawl_delay_seconds,
            max_retries=self.max_retries,
            fetch_timeout=self.fetch_timeout,
            robots_timeout=self.robots_timeout,
            user_agent=self.user_agent,
            checkpoint_every=self.checkpoint_every,
            min_content_chars=self.min_content_chars,
            output_file=Path(self.output_file),
            progress_file=Path(self.progress_file),
        )


# Global settings instance
settings = Settings()
