"""Sequential HTTP fetching with retry and backoff."""

import logging
import time
from typing import Callable, Optional

import httpx
from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from townscan.core.config import CrawlConfig
from townscan.core.utils import is_allowed_domain
from townscan.ingestion.models import FetchResult
from townscan.ingestion.politeness import PolitenessGate, RobotsCache

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class Fetcher:
    """Issues one GET at a time behind the politeness gate."""

    def __init__(
        self,
        config: CrawlConfig,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.sleep = sleep
        self.client = client or httpx.Client(
            timeout=config.fetch_timeout,
            follow_redirects=True,
        )
        self.client.headers.update(
            {
                "User-Agent": config.user_agent,
                "Accept": ACCEPT_HEADER,
                "Accept-Language": "en-US,en;q=0.9",
            }
        )
        self.gate = PolitenessGate(
            RobotsCache(self.client, config.user_agent, timeout=config.robots_timeout),
            delay_seconds=config.crawl_delay_seconds,
            sleep=sleep,
        )

    def allowed(self, url: str) -> bool:
        """Check robots.txt for the URL's host."""
        return self.gate.allowed(url)

    def _get_with_retry(self, url: str) -> httpx.Response:
        # Backoff doubles per attempt, starting at twice the crawl delay
        retryer = Retrying(
            stop=stop_after_attempt(max(1, self.config.max_retries)),
            wait=wait_exponential(multiplier=self.config.crawl_delay_seconds * 2, max=60),
            retry=retry_if_exception_type(httpx.TransportError),
            sleep=self.sleep,
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        )
        return retryer(self.client.get, url)

    def fetch(self, url: str) -> Optional[FetchResult]:
        """Fetch a single URL; None when it fails or redirects off the allowed domains."""
        self.gate.wait()

        try:
            response = self._get_with_retry(url)
        except (httpx.TransportError, RetryError) as e:
            logger.error(f"Giving up on {url} after {self.config.max_retries} attempts: {e}")
            return None

        if not response.is_success:
            logger.warning(f"HTTP {response.status_code} for {url}")
            return None

        final_url = str(response.url)
        if final_url != url and not is_allowed_domain(final_url, self.config):
            logger.warning(f"Redirected off allowed domains: {url} -> {final_url}")
            return None

        return FetchResult(
            url=url,
            status_code=response.status_code,
            content_type=response.headers.get("content-type", "").lower(),
            content=response.content,
            last_modified=response.headers.get("last-modified"),
        )

    def close(self) -> None:
        """Close HTTP client and drop the robots cache."""
        self.gate.robots.clear()
        self.client.close()
