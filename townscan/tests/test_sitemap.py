"""Tests for sitemap parsing and seed expansion."""

import httpx

from conftest import BASE, FakeSite, make_page
from townscan.ingestion.crawler import RespectfulCrawler
from townscan.ingestion.sitemap import expand_seeds, fetch_sitemap_urls, is_sitemap_url

NS = 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'


def urlset(*urls: str) -> httpx.Response:
    body = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return httpx.Response(
        200,
        content=f'<?xml version="1.0"?><urlset {NS}>{body}</urlset>'.encode(),
        headers={"content-type": "application/xml"},
    )


def sitemap_index(*urls: str) -> httpx.Response:
    body = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in urls)
    return httpx.Response(
        200,
        content=f'<?xml version="1.0"?><sitemapindex {NS}>{body}</sitemapindex>'.encode(),
        headers={"content-type": "application/xml"},
    )


def test_is_sitemap_url():
    """Test sitemap URL detection."""
    assert is_sitemap_url(f"{BASE}/sitemap.xml")
    assert is_sitemap_url(f"{BASE}/SiteMap")
    assert not is_sitemap_url(f"{BASE}/parks")


def test_fetch_sitemap_urls(crawl_config, make_fetcher):
    """Test a flat urlset."""
    site = FakeSite({}, extra={f"{BASE}/sitemap.xml": urlset(f"{BASE}/a/", f"{BASE}/b#x")})
    fetcher = make_fetcher(crawl_config, site)

    assert fetch_sitemap_urls(f"{BASE}/sitemap.xml", fetcher) == [f"{BASE}/a", f"{BASE}/b"]


def test_fetch_sitemap_index(crawl_config, make_fetcher):
    """Test sitemap indexes are expanded depth-first and capped."""
    extra = {
        f"{BASE}/sitemap.xml": sitemap_index(f"{BASE}/sitemap-1.xml", f"{BASE}/sitemap-2.xml"),
        f"{BASE}/sitemap-1.xml": urlset(f"{BASE}/a", f"{BASE}/b"),
        f"{BASE}/sitemap-2.xml": urlset(f"{BASE}/c", f"{BASE}/d"),
    }
    fetcher = make_fetcher(crawl_config, FakeSite({}, extra=extra))

    assert fetch_sitemap_urls(f"{BASE}/sitemap.xml", fetcher) == [f"{BASE}/{x}" for x in "abcd"]
    assert fetch_sitemap_urls(f"{BASE}/sitemap.xml", fetcher, max_urls=3) == [f"{BASE}/{x}" for x in "abc"]


def test_fetch_sitemap_bad_xml(crawl_config, make_fetcher):
    """Test that unparseable sitemaps yield nothing."""
    extra = {f"{BASE}/sitemap.xml": httpx.Response(200, content=b"<urlset><url>")}
    fetcher = make_fetcher(crawl_config, FakeSite({}, extra=extra))

    assert fetch_sitemap_urls(f"{BASE}/sitemap.xml", fetcher) == []


def test_expand_seeds_sitemap_first(crawl_config, make_fetcher):
    """Test sitemap URLs precede the literal seed."""
    site = FakeSite({}, extra={f"{BASE}/sitemap.xml": urlset(f"{BASE}/a", BASE)})
    fetcher = make_fetcher(crawl_config, site)

    assert expand_seeds(crawl_config, fetcher) == [f"{BASE}/a", BASE]


def test_expand_seeds_without_sitemap(crawl_config, make_fetcher):
    """Test the literal seed is kept when there is no sitemap."""
    fetcher = make_fetcher(crawl_config, FakeSite({}))
    assert expand_seeds(crawl_config, fetcher) == [BASE]


def test_expand_sitemap_seed_fallback(crawl_config, make_fetcher):
    """Test an empty sitemap seed falls back to itself."""
    config = crawl_config.model_copy(update={"seed_urls": [f"{BASE}/sitemap.xml"]})
    fetcher = make_fetcher(config, FakeSite({}))

    assert expand_seeds(config, fetcher) == [f"{BASE}/sitemap.xml"]


def test_crawl_uses_sitemap(crawl_config, make_fetcher):
    """Test that pages only listed in the sitemap are crawled."""
    pages = {BASE: make_page("Home"), f"{BASE}/orphan": make_page("Orphan")}
    site = FakeSite(pages, extra={f"{BASE}/sitemap.xml": urlset(f"{BASE}/orphan")})
    crawler = RespectfulCrawler(crawl_config, fetcher=make_fetcher(crawl_config, site))

    summary = crawler.crawl()
    crawler.close()

    assert [d.source_url for d in summary.documents] == [f"{BASE}/orphan", BASE]


def test_sitemap_urls_respect_robots(crawl_config, make_fetcher):
    """Test that sitemap entries are checked against robots.txt like any link."""
    pages = {
        BASE: make_page("Home"),
        f"{BASE}/private/secret": make_page("Secret"),
        f"{BASE}/public": make_page("Public"),
    }
    extra = {f"{BASE}/sitemap.xml": urlset(f"{BASE}/private/secret", f"{BASE}/public")}
    site = FakeSite(pages, robots="User-agent: *\nDisallow: /private\n", extra=extra)
    crawler = RespectfulCrawler(crawl_config, fetcher=make_fetcher(crawl_config, site))

    summary = crawler.crawl()
    crawler.close()

    assert f"{BASE}/private/secret" not in site.requests
    assert f"{BASE}/robots.txt" in site.requests
    assert [d.source_url for d in summary.documents] == [f"{BASE}/public", BASE]
    assert summary.stats.pages_skipped == 1
