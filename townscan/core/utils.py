"""Utility functions."""

import hashlib
import re
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse, urlunparse

from townscan.core.config import CrawlConfig

PDF_URL_RE = re.compile(r"\.pdf(?:\?|$)", re.IGNORECASE)


def normalize_url(url: str, base_url: Optional[str] = None) -> Optional[str]:
    """Resolve, strip the fragment and trailing path slashes; None if unusable."""
    try:
        if base_url:
            url = urljoin(base_url, url.strip())
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None

    return urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), parsed.path.rstrip("/"), "", parsed.query, "")
    )


def is_pdf_url(url: str) -> bool:
    """Detect a PDF by suffix, with or without a query string."""
    return bool(PDF_URL_RE.search(url))


def is_allowed_domain(url: str, config: CrawlConfig) -> bool:
    """Check if the URL's host is one of the allowed domains."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    return hostname is not None and hostname in config.allowed_domains


def should_skip_url(url: str, config: CrawlConfig) -> bool:
    """Check if a URL matches the skip-pattern table."""
    return any(pattern.search(url) for pattern in config.skip_patterns)


def department_for(url: str, config: CrawlConfig, title: str = "") -> Optional[str]:
    """Map a URL path (then the title) to a department name."""
    for pattern, department in config.department_patterns:
        if pattern.search(url):
            return department
    if title:
        for pattern, department in config.title_department_patterns:
            if pattern.search(title):
                return department
    return None


def compute_content_hash(content: str | bytes) -> str:
    """Compute SHA256 hash of content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def normalize_text(text: str) -> str:
    """Normalize whitespace in text."""
    # Replace multiple whitespace with single space
    text = re.sub(r"\s+", " ", text)
    # Remove leading/trailing whitespace
    return text.strip()


def humanize_url_slug(url: str) -> str:
    """Turn the last path segment of a URL into a readable title."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if not segments:
        return ""
    slug = unquote(segments[-1])
    slug = re.sub(r"\.(?:pdf|aspx?|html?|php)$", "", slug, flags=re.IGNORECASE)
    return normalize_text(re.sub(r"[-_]+", " ", slug))
