"""Tests for URL helpers and department mapping."""

import pytest

from townscan.core.utils import (
    compute_content_hash,
    department_for,
    humanize_url_slug,
    is_allowed_domain,
    is_pdf_url,
    normalize_url,
    should_skip_url,
)


@pytest.mark.parametrize(
    "url,base,expected",
    [
        ("HTTPS://Town.Example.GOV/Parks/", None, "https://town.example.gov/Parks"),
        ("/page#section", "https://town.example.gov/dir/", "https://town.example.gov/page"),
        ("sub/page?id=3", "https://town.example.gov/dir/", "https://town.example.gov/dir/sub/page?id=3"),
        ("https://town.example.gov/foo/?a=1", None, "https://town.example.gov/foo?a=1"),
        ("https://town.example.gov/search?q=a/", None, "https://town.example.gov/search?q=a/"),
        ("mailto:clerk@example.gov", None, None),
        ("javascript:void(0)", "https://town.example.gov", None),
        ("#top", None, None),
    ],
)
def test_normalize_url(url, base, expected):
    """Test URL normalization."""
    assert normalize_url(url, base) == expected


def test_is_pdf_url():
    """Test PDF detection by suffix."""
    assert is_pdf_url("https://town.example.gov/files/Report.PDF")
    assert is_pdf_url("https://town.example.gov/files/report.pdf?v=2")
    assert not is_pdf_url("https://town.example.gov/pdf-library")


def test_is_allowed_domain(crawl_config):
    """Test exact host allow-listing."""
    assert is_allowed_domain("https://town.example.gov/x", crawl_config)
    assert not is_allowed_domain("https://evil.town.example.gov.attacker.com/x", crawl_config)
    assert not is_allowed_domain("https://sub.town.example.gov/x", crawl_config)


@pytest.mark.parametrize(
    "url",
    [
        "https://town.example.gov/Calendar.aspx?EID=1",
        "https://town.example.gov/AgendaCenter/ViewFile/1",
        "https://town.example.gov/RSSFeed.aspx",
        "https://town.example.gov/Login.aspx",
        "https://town.example.gov/images/logo.png",
        "https://town.example.gov/forms/app.docx",
        "https://town.example.gov/ImageRepository/Document?id=3",
        "https://town.example.gov/Archive.aspx?AMID=4",
    ],
)
def test_should_skip_url(url, crawl_config):
    """Test skip patterns."""
    assert should_skip_url(url, crawl_config)


def test_should_not_skip_content(crawl_config):
    """Test that content pages are kept."""
    assert not should_skip_url("https://town.example.gov/245/Building-Permits", crawl_config)
    assert not should_skip_url("https://town.example.gov/DocumentCenter/View/12", crawl_config)


def test_department_for(crawl_config):
    """Test department mapping from URL, then title."""
    assert department_for("https://town.example.gov/planning/board", crawl_config) == (
        "Planning & Community Development"
    )
    assert department_for("https://town.example.gov/87/Public-Works", crawl_config) == "Public Works"
    assert department_for("https://town.example.gov/1234/Home", crawl_config) is None
    assert department_for("https://town.example.gov/1234/Home", crawl_config, "Town Clerk Services") == (
        "Town Clerk"
    )


def test_humanize_url_slug():
    """Test readable titles from URL paths."""
    assert humanize_url_slug("https://town.example.gov/docs/Annual_Report-2023.pdf") == "Annual Report 2023"
    assert humanize_url_slug("https://town.example.gov") == ""


def test_compute_content_hash():
    """Test hashing is stable across str and bytes."""
    assert compute_content_hash("abc") == compute_content_hash(b"abc")
    assert len(compute_content_hash("abc")) == 64
