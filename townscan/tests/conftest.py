"""Shared fixtures: a fake municipal site served through httpx.MockTransport."""

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from townscan.core.config import CrawlConfig
from townscan.chunking.tokenizer import get_tokenizer
from townscan.ingestion.fetcher import Fetcher

BASE = "https://town.example.gov"
LAST_MODIFIED = "Mon, 01 Jan 2024 00:00:00 GMT"

FILLER = (
    "Residents can find information about municipal services, office hours, "
    "contact details and upcoming changes on this page. The department updates "
    "these notices regularly so that everyone in town stays informed."
)


def make_page(title: str, links: tuple[str, ...] = (), body: Optional[str] = None) -> str:
    """A small CMS-like page with a nav bar and an article."""
    anchors = "".join(f'<li><a href="{href}">{href}</a></li>' for href in links)
    text = body if body is not None else f"<p>{title}: {FILLER}</p><p>{FILLER}</p>"
    return (
        f"<html><head><title>{title} | Town of Example, MA</title></head><body>"
        f"<nav><ul>{anchors}</ul></nav>"
        f"<div id='content'><article><h1>{title}</h1>{text}</article></div>"
        "</body></html>"
    )


class FakeSite:
    """Routes requests to canned pages and records every URL requested."""

    def __init__(
        self,
        pages: dict[str, str],
        robots: str = "",
        extra: Optional[dict[str, httpx.Response]] = None,
        before: Optional[Callable[[httpx.Request], None]] = None,
    ):
        self.pages = pages
        self.robots = robots
        self.extra = extra or {}
        self.before = before
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url).rstrip("/")
        self.requests.append(url)
        if self.before is not None:
            self.before(request)
        if request.url.path == "/robots.txt":
            if self.robots:
                return httpx.Response(200, text=self.robots)
            return httpx.Response(404)
        if url in self.extra:
            return self.extra[url]
        if url in self.pages:
            return httpx.Response(200, html=self.pages[url], headers={"last-modified": LAST_MODIFIED})
        return httpx.Response(404)

    @property
    def page_requests(self) -> list[str]:
        return [u for u in self.requests if not u.endswith(("/robots.txt", "/sitemap.xml"))]


@pytest.fixture
def crawl_config(tmp_path: Path) -> CrawlConfig:
    return CrawlConfig(
        seed_urls=[BASE],
        allowed_domains=["town.example.gov"],
        site_name="Example",
        max_depth=5,
        max_pages=100,
        crawl_delay_seconds=0.5,
        max_retries=3,
        checkpoint_every=5,
        output_file=tmp_path / "scraped-data.json",
        progress_file=tmp_path / "scrape-progress.json",
    )


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_fetcher(sleeps: list[float]):
    """Build a Fetcher over a FakeSite that records sleeps instead of waiting."""

    def _make(config: CrawlConfig, site: FakeSite) -> Fetcher:
        client = httpx.Client(transport=httpx.MockTransport(site), follow_redirects=True)
        return Fetcher(config, client=client, sleep=sleeps.append)

    return _make


@pytest.fixture(scope="session")
def tokenizer():
    return get_tokenizer("text-embedding-3-small")
