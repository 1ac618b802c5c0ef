"""Sitemap parsing and seed expansion."""

import logging
from typing import Optional
from urllib.parse import urlparse
from xml.etree import ElementTree as ET

from townscan.core.config import CrawlConfig
from townscan.core.utils import normalize_url
from townscan.ingestion.fetcher import Fetcher

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def is_sitemap_url(url: str) -> bool:
    lowered = url.lower()
    return lowered.endswith(".xml") or "sitemap" in lowered


def fetch_sitemap_urls(
    sitemap_url: str,
    fetcher: Fetcher,
    max_urls: Optional[int] = None,
    _seen: Optional[set[str]] = None,
) -> list[str]:
    """Fetch page URLs from a sitemap, expanding sitemap indexes depth-first."""
    seen = _seen if _seen is not None else set()
    if sitemap_url in seen:
        return []
    seen.add(sitemap_url)

    result = fetcher.fetch(sitemap_url)
    if result is None:
        logger.warning(f"Sitemap fetch failed: {sitemap_url}")
        return []

    try:
        root = ET.fromstring(result.content)
    except ET.ParseError as e:
        logger.error(f"Error parsing sitemap {sitemap_url}: {e}")
        return []

    urls: list[str] = []
    is_index = _local_name(root.tag) == "sitemapindex"
    for elem in root:
        if max_urls and len(urls) >= max_urls:
            break
        loc = next((c for c in elem if _local_name(c.tag) == "loc"), None)
        if loc is None or not loc.text:
            continue
        loc_url = loc.text.strip()
        if is_index:
            # Recursively fetch from child sitemap
            remaining = max_urls - len(urls) if max_urls else None
            urls.extend(fetch_sitemap_urls(loc_url, fetcher, remaining, seen))
        else:
            url = normalize_url(loc_url)
            if url:
                urls.append(url)

    logger.info(f"Sitemap parsed: {len(urls)} URLs from {sitemap_url}")
    return urls


def expand_seeds(config: CrawlConfig, fetcher: Fetcher) -> list[str]:
    """Sitemap URLs first, then the literal seeds; capped at the page budget."""
    from_sitemaps: list[str] = []
    literal: list[str] = []

    for seed in config.seed_urls:
        if is_sitemap_url(seed):
            found = fetch_sitemap_urls(seed, fetcher, config.max_pages)
            if not found:
                literal.append(seed)
        else:
            parsed = urlparse(seed)
            root_sitemap = f"{parsed.scheme}://{parsed.netloc}/sitemap.xml"
            found = fetch_sitemap_urls(root_sitemap, fetcher, config.max_pages)
            literal.append(seed)
        if found:
            logger.info(f"Expanded {seed} to {len(found)} URLs via sitemap")
            from_sitemaps.extend(found)

    seeds: list[str] = []
    seen: set[str] = set()
    for url in from_sitemaps[: config.max_pages]:
        if url not in seen:
            seen.add(url)
            seeds.append(url)
    for seed in literal:
        url = normalize_url(seed) or seed
        if url not in seen:
            seen.add(url)
            seeds.append(url)
    return seeds
