"""Boilerplate stripping and title cleanup for CMS-generated pages."""

import re

from townscan.core.utils import humanize_url_slug, normalize_text

# Applied in order; each entry is (pattern, label).
BOILERPLATE_PATTERNS: list[tuple[re.Pattern, str]] = [
    # Loading placeholders & spinner images
    (re.compile(r"!\[Loading\]\([^)]*\)"), "loading-img"),
    (re.compile(r"^Loading$", re.MULTILINE), "loading-text"),
    # Skip-to-content links
    (re.compile(r"\[Skip to Main Content\]\([^)]*\)", re.IGNORECASE), "skip-nav"),
    # Decorative banners and logos from the CMS image repository
    (re.compile(r"!\[\]\(https?://[^)]*/ImageRepository/[^)]*\)"), "banner-img"),
    # Breadcrumb trails: numbered lists where every item is an absolute link
    (re.compile(r"^(?:\d+\.\s*\[[^\]]*\]\(https?://[^)]*\)\n?)+", re.MULTILINE), "breadcrumbs"),
    # Modal/popup leftovers
    (re.compile(r"Do Not Show AgainClose"), "modal-close"),
    # Font measurement strings (anti-FOUT probes)
    (re.compile(r"(?:BESbswy){2,}"), "font-probe"),
    # Translation widget language picker
    (
        re.compile(r"Select Language\s*(?:Abkhaz|Acehnese)[\s\S]*?(?:Zulu|Zapotec)\b"),
        "translate-picker",
    ),
    (
        re.compile(r"^[a-zA-Z]+(?:ese|ian|ish|ala|ulu|tic|ari|aze)\b(?:[A-Z][a-z]+){5,}", re.MULTILINE),
        "translate-fragment",
    ),
    (re.compile(r"Powered by \[!\[Google Translate\][^\]]*\]\([^)]*\)\s*"), "translate-badge"),
    # Slideshow / carousel controls
    (re.compile(r"Arrow LeftArrow Right"), "carousel-arrows"),
    (re.compile(r"Slideshow Left Arrow[\s\S]*?Slideshow Right Arrow"), "slideshow-ctrl"),
    # Newsletter sign-up CTA
    (re.compile(r"Sign Up for the Town's Weekly e-Newsletter", re.IGNORECASE), "newsletter-cta"),
    (re.compile(r"^Close \*\*×\*\*$", re.MULTILINE), "close-btn"),
    # Empty (decorative) and alt-text-spam images
    (re.compile(r"!\[\]\([^)]*\)"), "empty-img"),
    (re.compile(r"!\[[^\]]{200,}\]\([^)]*\)"), "alt-spam-img"),
    (re.compile(r"\[Loading\]"), "loading-bracket"),
    # CMS footer branding
    (re.compile(r"Government Websites by CivicPlus®?"), "civic-footer"),
    (re.compile(r"\[Powered by.*?CivicPlus.*?\]\([^)]*\)"), "civic-powered"),
    (re.compile(r"(?:Loading\s*\n\s*){2,}"), "multi-loading"),
]

MULTI_BLANK_RE = re.compile(r"\n{3,}")


def strip_boilerplate(markdown: str) -> str:
    """Remove site chrome from converted markdown, keeping page content."""
    cleaned = markdown
    for pattern, _label in BOILERPLATE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    # Collapse runs of 3+ blank lines into 2
    cleaned = MULTI_BLANK_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def _title_suffix_patterns(site_name: str) -> list[re.Pattern]:
    patterns = [
        re.compile(r"\s*[|\-–—]\s*(?:www\.)?[\w-]+\.gov\b", re.IGNORECASE),
        re.compile(r"\s*•\s*CivicEngage\s*", re.IGNORECASE),
    ]
    if site_name:
        name = re.escape(site_name)
        # "| Town of X", "- X, MA", "• X • CivicEngage"; after the .gov rule so "| x.gov" goes whole
        patterns.insert(
            1,
            re.compile(
                rf"\s*[•|\-–—]\s*(?:(?:Town|City) of )?{name}(?:,?\s*(?-i:[A-Z]{{2}})\b)?"
                rf"(?:\s*[•|\-–—]\s*CivicEngage)?",
                re.IGNORECASE,
            ),
        )
    return patterns


def clean_title(raw_title: str, url: str, site_name: str = "") -> str:
    """Strip site-name and CMS suffixes; fall back to the URL slug."""
    title = normalize_text(raw_title or "")
    for pattern in _title_suffix_patterns(site_name):
        title = pattern.sub("", title)
    title = title.strip()

    if not title:
        title = humanize_url_slug(url)
    return title or "Untitled"
