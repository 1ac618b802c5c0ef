"""Polite, resumable crawler for a municipal website."""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from townscan.core.config import CrawlConfig, settings
from townscan.core.constants import DOCUMENT_TYPE_HTML
from townscan.core.utils import compute_content_hash, department_for
from townscan.ingestion.fetcher import Fetcher
from townscan.ingestion.frontier import CrawlFrontier
from townscan.ingestion.links import extract_links
from townscan.ingestion.models import CrawlSummary, CrawlTask, ScrapedDocument
from townscan.ingestion.parse_html import extract_content
from townscan.ingestion.sitemap import expand_seeds
from townscan.ingestion.storage import CheckpointStore

logger = logging.getLogger(__name__)


class RespectfulCrawler:
    """Sequential breadth-first crawler that follows robots.txt and rate limits."""

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Optional[Fetcher] = None,
        store: Optional[CheckpointStore] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.fetcher = fetcher or Fetcher(config, sleep=sleep)
        self.store = store or CheckpointStore(config.progress_file, config.output_file)

    def _start_frontier(self, resume: bool) -> CrawlFrontier:
        if resume:
            progress = self.store.load()
            if progress is not None:
                return CrawlFrontier.resume(self.config, progress)
            logger.info("No progress file found, starting fresh")

        seeds = expand_seeds(self.config, self.fetcher)
        if len(seeds) > len(self.config.seed_urls):
            logger.info(f"Expanded {len(self.config.seed_urls)} seeds to {len(seeds)} URLs via sitemaps")
        return CrawlFrontier.from_seeds(self.config, seeds)

    def _process(self, frontier: CrawlFrontier, task: CrawlTask) -> None:
        url = task.url

        # Configured seeds are fetched unconditionally; everything else is gated
        if not task.is_seed and not self.fetcher.allowed(url):
            logger.debug(f"Blocked by robots.txt: {url}")
            frontier.stats.pages_skipped += 1
            return

        result = self.fetcher.fetch(url)
        if result is None:
            frontier.stats.fetch_failures += 1
            return

        if not result.is_html:
            if result.is_pdf:
                frontier.add_pdf(url)
            else:
                frontier.stats.pages_skipped += 1
            return

        frontier.stats.pages_fetched += 1
        html = result.text

        # Links come from the raw page so navigation areas are still followed
        links = extract_links(html, url)
        for pdf_url in links.pdf_links:
            frontier.add_pdf(pdf_url)
        frontier.enqueue_links(links.page_links, task.depth + 1)

        extracted = extract_content(html, url, self.config.site_name)
        if extracted is None or len(extracted.markdown) < self.config.min_content_chars:
            logger.info(f"Skipping {url}: insufficient content")
            frontier.stats.extraction_failures += 1
            return

        frontier.add_result(
            ScrapedDocument(
                content=extracted.markdown,
                source_url=url,
                title=extracted.title,
                document_type=DOCUMENT_TYPE_HTML,
                department=department_for(url, self.config, extracted.title),
                last_updated=result.last_modified or datetime.now(timezone.utc).isoformat(),
                content_hash=compute_content_hash(extracted.markdown),
                size_bytes=len(extracted.markdown.encode("utf-8")),
            )
        )

        if frontier.should_checkpoint():
            self.store.save(frontier.snapshot())
            logger.info(
                f"Progress saved ({frontier.pages_processed} pages, "
                f"{len(frontier.pdf_urls)} PDFs discovered)"
            )

    def crawl(self, resume: bool = False) -> CrawlSummary:
        """Run the crawl to completion or until the page budget is spent."""
        started = time.monotonic()
        logger.info(
            f"Starting crawl: seeds={self.config.seed_urls}, max_depth={self.config.max_depth}, "
            f"max_pages={self.config.max_pages}, delay={self.config.crawl_delay_seconds}s"
        )

        frontier = self._start_frontier(resume)

        while frontier.has_budget():
            task = frontier.next_task()
            if task is None:
                break
            logger.info(
                f"Crawling {frontier.pages_processed + 1}/~{self.config.max_pages} "
                f"(depth {task.depth}): {task.url}"
            )
            self._process(frontier, task)

        self.store.write_results(frontier.results, frontier.pdf_urls)
        self.store.clear()

        duration = time.monotonic() - started
        logger.info(
            f"Crawl complete: {frontier.pages_processed} pages, {len(frontier.pdf_urls)} PDFs "
            f"in {duration:.1f}s"
        )
        return CrawlSummary(
            documents=frontier.results,
            pdf_urls=frontier.pdf_urls,
            stats=frontier.stats,
            resumed=frontier.resumed,
            duration_seconds=duration,
        )

    def close(self) -> None:
        self.fetcher.close()


def create_crawler(
    config: Optional[CrawlConfig] = None,
    max_pages: Optional[int] = None,
    max_depth: Optional[int] = None,
) -> RespectfulCrawler:
    """Create a configured crawler."""
    if config is None:
        config = settings.crawl_config(max_pages=max_pages, max_depth=max_depth)
    return RespectfulCrawler(config)
