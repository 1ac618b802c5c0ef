"""Breadth-first crawl frontier with visited-set and checkpoint snapshots."""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Iterable, Optional

from townscan.core.config import CrawlConfig
from townscan.core.utils import is_allowed_domain, is_pdf_url, normalize_url, should_skip_url
from townscan.ingestion.models import CrawlProgress, CrawlTask, ScrapedDocument

logger = logging.getLogger(__name__)


class FrontierError(RuntimeError):
    """The frontier could not be initialized."""


class CrawlFrontier:
    """Owns the queue, visited set, discovered PDFs and partial results of a run.

    A URL is marked visited the moment it is dequeued, whether or not it is
    later fetched, so it is never handed out twice, including across a
    checkpoint/resume boundary.
    """

    def __init__(self, config: CrawlConfig, progress: CrawlProgress, resumed: bool = False):
        self.config = config
        self.visited: set[str] = set(progress.visited)
        self.queue: deque[CrawlTask] = deque(progress.queue)
        self._queued: set[str] = {task.url for task in self.queue}
        self.pdf_urls: list[str] = list(progress.pdf_urls)
        self._pdf_set: set[str] = set(self.pdf_urls)
        self.results: list[ScrapedDocument] = list(progress.results)
        self.stats = progress.stats.model_copy()
        self.started_at = progress.started_at
        self.resumed = resumed

    @classmethod
    def from_seeds(cls, config: CrawlConfig, seeds: Iterable[str]) -> "CrawlFrontier":
        """Start a fresh frontier; raises FrontierError if no seed is usable."""
        now = datetime.now(timezone.utc)
        frontier = cls(config, CrawlProgress(started_at=now, last_saved_at=now))
        configured = {normalize_url(seed) or seed for seed in config.seed_urls}
        for seed in seeds:
            url = normalize_url(seed)
            if url and frontier._eligible(url):
                frontier._push(CrawlTask(url=url, depth=0, is_seed=url in configured))
            elif url and is_pdf_url(url) and is_allowed_domain(url, config):
                frontier.add_pdf(url)
        if not frontier.queue and not frontier.pdf_urls:
            raise FrontierError(f"No usable seed URLs in {list(config.seed_urls)}")
        return frontier

    @classmethod
    def resume(cls, config: CrawlConfig, progress: CrawlProgress) -> "CrawlFrontier":
        logger.info(
            f"Resuming from {len(progress.visited)} visited, {len(progress.queue)} queued, "
            f"{len(progress.results)} documents"
        )
        return cls(config, progress, resumed=True)

    @property
    def pages_processed(self) -> int:
        return len(self.results)

    def has_budget(self) -> bool:
        return self.pages_processed < self.config.max_pages

    def _eligible(self, url: str) -> bool:
        return is_allowed_domain(url, self.config) and not should_skip_url(url, self.config)

    def _push(self, task: CrawlTask) -> None:
        if task.url in self.visited or task.url in self._queued:
            return
        self.queue.append(task)
        self._queued.add(task.url)

    def next_task(self) -> Optional[CrawlTask]:
        """Dequeue the next fetchable page, diverting PDFs and filtered URLs."""
        while self.queue:
            task = self.queue.popleft()
            self._queued.discard(task.url)
            if task.url in self.visited:
                continue
            self.visited.add(task.url)

            if task.depth > self.config.max_depth or not self._eligible(task.url):
                self.stats.pages_skipped += 1
                continue

            if is_pdf_url(task.url):
                self.add_pdf(task.url)
                continue

            return task
        return None

    def enqueue_links(self, urls: Iterable[str], depth: int) -> None:
        for url in urls:
            if self._eligible(url):
                self._push(CrawlTask(url=url, depth=depth))

    def add_pdf(self, url: str) -> None:
        if url not in self._pdf_set and is_allowed_domain(url, self.config):
            self._pdf_set.add(url)
            self.pdf_urls.append(url)

    def add_result(self, document: ScrapedDocument) -> None:
        self.results.append(document)

    def should_checkpoint(self) -> bool:
        every = self.config.checkpoint_every
        return every > 0 and self.pages_processed > 0 and self.pages_processed % every == 0

    def snapshot(self) -> CrawlProgress:
        """Plain-data copy of the current state for checkpointing."""
        return CrawlProgress(
            visited=sorted(self.visited),
            queue=list(self.queue),
            pdf_urls=list(self.pdf_urls),
            results=list(self.results),
            stats=self.stats.model_copy(),
            started_at=self.started_at,
            last_saved_at=datetime.now(timezone.utc),
        )
