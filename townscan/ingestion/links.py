"""Hyperlink discovery from raw page HTML."""

from bs4 import BeautifulSoup

from townscan.core.utils import is_pdf_url, normalize_url
from townscan.ingestion.models import DiscoveredLinks


def extract_links(html: str, base_url: str) -> DiscoveredLinks:
    """Split a page's anchors into ordinary page links and PDF links."""
    soup = BeautifulSoup(html, "lxml")
    links = DiscoveredLinks()
    seen: set[str] = set()

    for anchor in soup.find_all("a", href=True):
        normalized = normalize_url(anchor["href"], base_url)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)

        if is_pdf_url(normalized):
            links.pdf_links.append(normalized)
        else:
            links.page_links.append(normalized)

    return links
