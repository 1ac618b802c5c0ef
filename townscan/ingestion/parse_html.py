"""HTML main-content extraction and markdown conversion."""

import logging
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify
from readability import Document

from townscan.core.utils import normalize_text
from townscan.ingestion.cleaners import clean_title, strip_boilerplate
from townscan.ingestion.models import ExtractedContent

logger = logging.getLogger(__name__)

STRIP_TAGS = ["script", "style", "noscript", "iframe"]
TABLE_PLACEHOLDER = "TOWNSCANTABLE{}X"


def extract_title(html: str) -> str:
    """Extract the raw <title> text."""
    soup = BeautifulSoup(html, "lxml")
    title_tag = soup.find("title")
    if title_tag:
        return normalize_text(title_tag.get_text())
    return ""


def table_to_markdown(table) -> str:
    """Render a <table> as a pipe table with a synthesized header separator."""
    rows = []
    for tr in table.find_all("tr"):
        cells = [
            normalize_text(cell.get_text(" ")).replace("|", "\\|")
            for cell in tr.find_all(["th", "td"])
        ]
        if cells:
            rows.append(cells)

    if not rows:
        return ""

    col_count = max(len(r) for r in rows)
    lines = ["| " + " | ".join(rows[0]) + " |"]
    lines.append("|" + " --- |" * max(col_count, 1))
    for row in rows[1:]:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to markdown, preserving tables."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(STRIP_TAGS):
        tag.decompose()

    tables: list[str] = []
    for table in soup.find_all("table"):
        if table.find_parent("table") is not None:
            continue
        placeholder = soup.new_tag("p")
        placeholder.string = TABLE_PLACEHOLDER.format(len(tables))
        tables.append(table_to_markdown(table))
        table.replace_with(placeholder)

    markdown = markdownify(str(soup), heading_style=ATX, bullets="-")
    for i, table_md in enumerate(tables):
        markdown = markdown.replace(TABLE_PLACEHOLDER.format(i), f"\n\n{table_md}\n\n")
    return markdown


def extract_content(html: str, url: str, site_name: str = "") -> Optional[ExtractedContent]:
    """Isolate the main article region and return clean markdown."""
    # Title before readability mutates the tree
    raw_title = extract_title(html)

    try:
        doc = Document(html, url=url)
        main_content = doc.summary(html_partial=True)
        article_title = doc.title()
    except Exception as e:
        logger.error(f"Content extraction failed for {url}: {e}")
        return None

    if not main_content:
        return None

    markdown = strip_boilerplate(html_to_markdown(main_content))

    if not article_title or article_title == "[no-title]":
        article_title = raw_title
    title = clean_title(article_title, url, site_name)

    return ExtractedContent(title=title, markdown=markdown)
