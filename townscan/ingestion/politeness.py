"""robots.txt compliance and fixed inter-request spacing."""

import logging
import time
from typing import Callable
from urllib.parse import urlparse
from urllib.robotparser import RobotFileParser

import httpx

logger = logging.getLogger(__name__)


class RobotsCache:
    """Per-host robots.txt directives, fetched lazily once per run."""

    def __init__(self, client: httpx.Client, user_agent: str, timeout: float = 10.0):
        self.client = client
        self.user_agent = user_agent
        self.timeout = timeout
        self._parsers: dict[str, RobotFileParser] = {}

    def _load(self, robots_url: str) -> RobotFileParser:
        parser = RobotFileParser()
        parser.set_url(robots_url)
        lines: list[str] = []
        try:
            response = self.client.get(robots_url, timeout=self.timeout)
            if response.status_code == 200:
                lines = response.text.splitlines()
            else:
                logger.debug(f"No robots.txt at {robots_url} ({response.status_code})")
        except httpx.HTTPError as e:
            logger.warning(f"Could not fetch {robots_url}: {e}")
        # An empty rule set allows everything
        parser.parse(lines)
        return parser

    def allowed(self, url: str) -> bool:
        """Check if URL can be fetched according to robots.txt."""
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            return True
        robots_url = f"{parsed.scheme}://{parsed.netloc}/robots.txt"
        if robots_url not in self._parsers:
            self._parsers[robots_url] = self._load(robots_url)
        return self._parsers[robots_url].can_fetch(self.user_agent, url)

    def clear(self) -> None:
        self._parsers.clear()


class PolitenessGate:
    """Robots cache plus the fixed delay awaited before every fetch."""

    def __init__(
        self,
        robots: RobotsCache,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.robots = robots
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def allowed(self, url: str) -> bool:
        return self.robots.allowed(url)

    def wait(self) -> None:
        if self.delay_seconds > 0:
            self.sleep(self.delay_seconds)
