"""Data models for the crawl pipeline."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CrawlTask(BaseModel):
    """A queued URL and the link depth it was discovered at."""

    url: str
    depth: int = 0
    # Configured seed URL; sitemap entries are depth 0 but not seeds
    is_seed: bool = False


class FetchResult(BaseModel):
    """Successful (2xx) HTTP response for a single URL."""

    url: str
    status_code: int
    content_type: str
    content: bytes
    last_modified: Optional[str] = None

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type

    @property
    def is_pdf(self) -> bool:
        return "pdf" in self.content_type

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class ExtractedContent(BaseModel):
    """Main article content of a page converted to markdown."""

    title: str
    markdown: str


class DiscoveredLinks(BaseModel):
    """Normalized hyperlinks found on a page."""

    page_links: list[str] = Field(default_factory=list)
    pdf_links: list[str] = Field(default_factory=list)


class ScrapedDocument(BaseModel):
    """A finished document ready for chunking."""

    model_config = ConfigDict(frozen=True)

    content: str
    source_url: str
    title: str
    document_type: Literal["html", "pdf"] = "html"
    department: Optional[str] = None
    last_updated: str
    content_hash: str
    size_bytes: int


class CrawlStats(BaseModel):
    """Counters reported at the end of a run."""

    pages_fetched: int = 0
    pages_skipped: int = 0
    fetch_failures: int = 0
    extraction_failures: int = 0


class CrawlProgress(BaseModel):
    """Checkpointed frontier state, reloaded verbatim on resume."""

    visited: list[str] = Field(default_factory=list)
    queue: list[CrawlTask] = Field(default_factory=list)
    pdf_urls: list[str] = Field(default_factory=list)
    results: list[ScrapedDocument] = Field(default_factory=list)
    stats: CrawlStats = Field(default_factory=CrawlStats)
    started_at: datetime
    last_saved_at: datetime


class CrawlSummary(BaseModel):
    """Outcome of a crawl run."""

    documents: list[ScrapedDocument]
    pdf_urls: list[str]
    stats: CrawlStats
    resumed: bool = False
    duration_seconds: float = 0.0

    @property
    def total_pages(self) -> int:
        return len(self.documents)

    @property
    def total_pdfs(self) -> int:
        return len(self.pdf_urls)
