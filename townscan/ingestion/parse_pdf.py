"""PDF download and text extraction."""

import logging
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

import fitz  # PyMuPDF

from townscan.core.config import CrawlConfig
from townscan.core.constants import DOCUMENT_TYPE_PDF
from townscan.core.utils import compute_content_hash, department_for, humanize_url_slug, normalize_text
from townscan.ingestion.cleaners import MULTI_BLANK_RE
from townscan.ingestion.fetcher import Fetcher
from townscan.ingestion.models import ScrapedDocument

logger = logging.getLogger(__name__)


def extract_pdf_text(pdf_bytes: bytes) -> tuple[str, dict]:
    """Extract text from PDF, one blank-line-separated block per page."""
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        logger.error(f"Error opening PDF: {e}")
        return "", {"page_count": 0, "title": None}

    with doc:
        pages = []
        for page in doc:
            text = page.get_text().strip()
            if text:
                pages.append(text)
        metadata = {
            "page_count": doc.page_count,
            "title": (doc.metadata or {}).get("title") or None,
        }

    text = MULTI_BLANK_RE.sub("\n\n", "\n\n".join(pages))
    return text.strip(), metadata


def _pdf_title(url: str, metadata: dict, text: str) -> str:
    title = normalize_text(metadata.get("title") or "")
    if title:
        return title
    title = humanize_url_slug(url)
    if title:
        return title
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    return normalize_text(first_line)[:120] or "Untitled"


class PdfExtractor:
    """Turns discovered PDF URLs into documents for the chunking chain."""

    def __init__(self, config: CrawlConfig, fetcher: Fetcher):
        self.config = config
        self.fetcher = fetcher
        self.failures = 0

    def extract(self, url: str) -> Optional[ScrapedDocument]:
        if not self.fetcher.allowed(url):
            logger.debug(f"Blocked by robots.txt: {url}")
            return None

        result = self.fetcher.fetch(url)
        if result is None:
            self.failures += 1
            return None

        text, metadata = extract_pdf_text(result.content)
        if len(text) < self.config.min_content_chars:
            logger.warning(f"No usable text in PDF {url}")
            self.failures += 1
            return None

        title = _pdf_title(url, metadata, text)
        logger.info(f"Extracted {metadata['page_count']} pages from {url}")
        return ScrapedDocument(
            content=text,
            source_url=url,
            title=title,
            document_type=DOCUMENT_TYPE_PDF,
            department=department_for(url, self.config, title),
            last_updated=result.last_modified or datetime.now(timezone.utc).isoformat(),
            content_hash=compute_content_hash(text),
            size_bytes=len(result.content),
        )

    def extract_all(self, urls: Iterable[str]) -> Iterator[ScrapedDocument]:
        """Yield documents for a deduplicated list of PDF URLs."""
        seen: set[str] = set()
        for url in urls:
            if url in seen:
                continue
            seen.add(url)
            document = self.extract(url)
            if document is not None:
                yield document
