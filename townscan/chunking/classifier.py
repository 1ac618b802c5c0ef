"""Heuristic document-type detection and per-type chunking parameters.

Rules are tried in order and the first type with a matching pattern wins, so
reordering ``DOCUMENT_TYPE_RULES`` changes classification results.
"""

import re

from townscan.core.constants import CLASSIFIER_PREFIX_CHARS
from townscan.chunking.models import BreakStrategy, ChunkingConfig, DocumentType

CHUNKING_CONFIGS: dict[DocumentType, ChunkingConfig] = {
    DocumentType.ZONING_BYLAWS: ChunkingConfig(
        max_tokens=1024, overlap_tokens=256, break_strategy=BreakStrategy.SECTION_HEADERS
    ),
    DocumentType.GENERAL_BYLAWS: ChunkingConfig(
        max_tokens=768, overlap_tokens=192, break_strategy=BreakStrategy.NUMBERED_PARAGRAPHS
    ),
    DocumentType.BUILDING_PERMITS: ChunkingConfig(
        max_tokens=512, overlap_tokens=128, break_strategy=BreakStrategy.PROCEDURAL_STEPS
    ),
    DocumentType.FEE_SCHEDULES: ChunkingConfig(
        max_tokens=384, overlap_tokens=96, break_strategy=BreakStrategy.TABLE_ATOMIC
    ),
    DocumentType.BUDGET: ChunkingConfig(
        max_tokens=1280, overlap_tokens=320, break_strategy=BreakStrategy.NARRATIVE_DATA_SEPARATION
    ),
    DocumentType.BOARD_OF_HEALTH: ChunkingConfig(
        max_tokens=768, overlap_tokens=192, break_strategy=BreakStrategy.TOPIC_BASED
    ),
    DocumentType.PUBLIC_WORKS: ChunkingConfig(
        max_tokens=512, overlap_tokens=128, break_strategy=BreakStrategy.SECTION_BASED
    ),
    DocumentType.MEETING_MINUTES: ChunkingConfig(
        max_tokens=768, overlap_tokens=192, break_strategy=BreakStrategy.AGENDA_ITEMS
    ),
    DocumentType.PLANNING_BOARD: ChunkingConfig(
        max_tokens=896, overlap_tokens=224, break_strategy=BreakStrategy.ITEM_PROJECT_SEPARATION
    ),
    DocumentType.LOCAL_BUSINESS: ChunkingConfig(
        max_tokens=512, overlap_tokens=128, break_strategy=BreakStrategy.BUSINESS_PROFILE
    ),
    DocumentType.NEWS: ChunkingConfig(
        max_tokens=768, overlap_tokens=192, break_strategy=BreakStrategy.ARTICLE_PARAGRAPHS
    ),
    DocumentType.GENERAL: ChunkingConfig(
        max_tokens=768, overlap_tokens=192, break_strategy=BreakStrategy.SECTION_BASED
    ),
}


def _rule(doc_type: DocumentType, *patterns: str, flags: int = re.IGNORECASE):
    return doc_type, [re.compile(p, flags) for p in patterns]


DOCUMENT_TYPE_RULES: list[tuple[DocumentType, list[re.Pattern]]] = [
    _rule(
        DocumentType.ZONING_BYLAWS,
        r"zoning\s*by-?law",
        r"dimensional\s*requirements",
        r"zoning\s*regulation",
    ),
    _rule(DocumentType.GENERAL_BYLAWS, r"general\s*by-?law", r"town\s*by-?law"),
    _rule(
        DocumentType.BUILDING_PERMITS,
        r"building\s*permit",
        r"permit\s*application",
        r"construction\s*permit",
    ),
    _rule(DocumentType.FEE_SCHEDULES, r"fee\s*schedule", r"schedule\s*of\s*fees", r"fee\s*table"),
    _rule(DocumentType.BUDGET, r"budget", r"financial\s*report", r"appropriation"),
    _rule(DocumentType.BOARD_OF_HEALTH, r"board\s*of\s*health", r"health\s*regulation", r"sanitary"),
    _rule(
        DocumentType.PUBLIC_WORKS,
        r"public\s*works",
        r"transfer\s*station",
        r"recycling",
        r"\bDPW\b",
        r"\bRTS\b",
    ),
    _rule(
        DocumentType.MEETING_MINUTES,
        r"meeting\s*minutes",
        r"minutes\s*of",
        r"select\s*board\s*meeting",
    ),
    _rule(
        DocumentType.PLANNING_BOARD,
        r"planning\s*board",
        r"planning\s*department",
        r"site\s*plan\s*review",
    ),
    _rule(
        DocumentType.LOCAL_BUSINESS,
        r"\b\d+(?:\.\d)?\s*stars?\b",
        r"\b\d+\s*reviews?\b",
        r"\b(?:rating|rated)\b",
        r"\b(?:yelp|angi|homeadvisor|thumbtack|bbb|tripadvisor)\b",
        r"business\s*directory|local\s*business",
        r"hours:\s*\d|open\s*\d",
    ),
    _rule(
        DocumentType.NEWS,
        r"patch\.com|wickedlocal",
        r"by\s+\w+\s+\w+\s*\|\s*\w+\s+\d+,\s+\d{4}",
        r"(?:posted|published)\s+on",
        r"share\s*article|print\s*article",
    ),
]


def detect_document_type(title: str, content: str) -> DocumentType:
    """Classify from the title plus the head of the content."""
    search_text = f"{title}\n{content[:CLASSIFIER_PREFIX_CHARS]}"
    for doc_type, patterns in DOCUMENT_TYPE_RULES:
        if any(p.search(search_text) for p in patterns):
            return doc_type
    return DocumentType.GENERAL


def get_chunking_config(doc_type: DocumentType) -> ChunkingConfig:
    return CHUNKING_CONFIGS[doc_type]
