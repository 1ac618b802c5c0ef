"""Application constants."""

import re

# Content types
DOCUMENT_TYPE_HTML = "html"
DOCUMENT_TYPE_PDF = "pdf"

# Crawl defaults
DEFAULT_CHECKPOINT_EVERY = 25
DEFAULT_MIN_CONTENT_CHARS = 50

# Embedding model ceiling (8192) minus headroom
EMBEDDING_TOKEN_LIMIT = 7500
SAFETY_OVERLAP_TOKENS = 50

# Classifier inspects the title plus this much of the body
CLASSIFIER_PREFIX_CHARS = 2000

# Chunking defaults
DEFAULT_OVERLAP_RATIO = 0.25  # 25% overlap

SKIP_URL_PATTERNS: list[re.Pattern] = [
    # Calendar / agenda / RSS
    re.compile(r"/Calendar\.aspx", re.IGNORECASE),
    re.compile(r"/AgendaCenter", re.IGNORECASE),
    re.compile(r"/rss", re.IGNORECASE),
    # Login / auth
    re.compile(r"/Login\.aspx", re.IGNORECASE),
    re.compile(r"/Account/", re.IGNORECASE),
    # Search
    re.compile(r"/Search\.aspx", re.IGNORECASE),
    re.compile(r"/SearchResults", re.IGNORECASE),
    # Print / email / share
    re.compile(r"/print/", re.IGNORECASE),
    re.compile(r"/email/", re.IGNORECASE),
    re.compile(r"/share/", re.IGNORECASE),
    # Media assets
    re.compile(r"\.(?:jpg|jpeg|png|gif|svg|ico|webp|bmp|tiff)$", re.IGNORECASE),
    # Stylesheets / scripts
    re.compile(r"\.(?:css|js|map)$", re.IGNORECASE),
    # Office documents (PDFs are collected separately)
    re.compile(r"\.(?:xlsx|xls|docx|doc|pptx|ppt|zip|rar)$", re.IGNORECASE),
    # Non-http schemes and anchors
    re.compile(r"^mailto:", re.IGNORECASE),
    re.compile(r"^tel:", re.IGNORECASE),
    re.compile(r"^javascript:", re.IGNORECASE),
    re.compile(r"#"),
    # Decorative banner repository
    re.compile(r"/ImageRepository/", re.IGNORECASE),
    # Font / asset directories
    re.compile(r"/fonts?/", re.IGNORECASE),
    re.compile(r"/assets?/", re.IGNORECASE),
    # Archive pagination
    re.compile(r"/Archive\.aspx\?", re.IGNORECASE),
]

DEPARTMENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"/planning", re.IGNORECASE), "Planning & Community Development"),
    (re.compile(r"/zoning", re.IGNORECASE), "Planning & Community Development"),
    (re.compile(r"/building", re.IGNORECASE), "Building Department"),
    (re.compile(r"/dpw|/public-?works|/87/", re.IGNORECASE), "Public Works"),
    (re.compile(r"/health", re.IGNORECASE), "Board of Health"),
    (re.compile(r"/fire", re.IGNORECASE), "Fire Department"),
    (re.compile(r"/police", re.IGNORECASE), "Police Department"),
    (re.compile(r"/assessing|/57/", re.IGNORECASE), "Assessing"),
    (re.compile(r"/treasurer|/collector", re.IGNORECASE), "Treasurer/Collector"),
    (re.compile(r"/clerk", re.IGNORECASE), "Town Clerk"),
    (re.compile(r"/select-?board|/488/", re.IGNORECASE), "Select Board"),
    (re.compile(r"/conservation", re.IGNORECASE), "Conservation"),
    (re.compile(r"/recreation|/park", re.IGNORECASE), "Parks & Recreation"),
    (re.compile(r"/library", re.IGNORECASE), "Library"),
    (re.compile(r"/school|k12", re.IGNORECASE), "Schools"),
    (re.compile(r"/water|/sewer", re.IGNORECASE), "Water & Sewer"),
    (re.compile(r"/permit|/4644", re.IGNORECASE), "Building Department"),
    (re.compile(r"/fee", re.IGNORECASE), "Finance"),
    (re.compile(r"/voter|/election", re.IGNORECASE), "Town Clerk"),
    (re.compile(r"/transfer-?station|/rts", re.IGNORECASE), "Public Works"),
]

# Consulted only when no URL pattern matches
TITLE_DEPARTMENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"planning\s*board|zoning", re.IGNORECASE), "Planning & Community Development"),
    (re.compile(r"building\s*(?:permit|inspector|department)", re.IGNORECASE), "Building Department"),
    (re.compile(r"public\s*works|transfer\s*station|recycling|snow", re.IGNORECASE), "Public Works"),
    (re.compile(r"board\s*of\s*health|public\s*health", re.IGNORECASE), "Board of Health"),
    (re.compile(r"fire\s*(?:department|chief|prevention)", re.IGNORECASE), "Fire Department"),
    (re.compile(r"police", re.IGNORECASE), "Police Department"),
    (re.compile(r"assessor|property\s*tax|abatement", re.IGNORECASE), "Assessing"),
    (re.compile(r"town\s*clerk|election|voter|dog\s*licen[cs]e", re.IGNORECASE), "Town Clerk"),
    (re.compile(r"select\s*board", re.IGNORECASE), "Select Board"),
    (re.compile(r"conservation|wetland", re.IGNORECASE), "Conservation"),
    (re.compile(r"recreation|park", re.IGNORECASE), "Parks & Recreation"),
    (re.compile(r"library", re.IGNORECASE), "Library"),
    (re.compile(r"budget|finance|treasurer|collector", re.IGNORECASE), "Finance"),
]
