"""Per-fragment metadata: tables, citations, keywords, zone codes, dates."""

import re
from typing import Optional

from townscan.chunking.models import ChunkType, DocumentType
from townscan.chunking.segmenter import TABLE_RE

CROSS_REF_RE = re.compile(
    r"(?:§|Section|Chapter|Article)\s*[\d.]*\d(?:\s*(?:of|,)\s*(?:the\s+)?"
    r"(?:Zoning|General|Town)\s*(?:By-?law|Code|Regulation)s?)?",
    re.IGNORECASE,
)

KEYWORD_PATTERNS: list[re.Pattern] = [
    re.compile(r"\b(?:setback|FAR|floor area ratio|height limit|lot coverage)\b", re.IGNORECASE),
    re.compile(r"\b(?:permit|license|certificate|variance|waiver)\b", re.IGNORECASE),
    re.compile(r"\b(?:residential|commercial|industrial|mixed.?use)\b", re.IGNORECASE),
    re.compile(r"\b(?:fee|cost|charge|price|rate)\b", re.IGNORECASE),
    re.compile(r"\b(?:deadline|due date|hours|schedule)\b", re.IGNORECASE),
]

ZONE_PATTERNS: list[re.Pattern] = [
    re.compile(r"\b(?:SRB|SRC|SRA|GRB|GRA|APT|BR|CH|CI|IND|RG)\b"),
    re.compile(r"\b(?:Single\s*Residence|General\s*Residence|Business|Commercial|Industrial)\b", re.IGNORECASE),
]

EFFECTIVE_DATE_RE = re.compile(r"^.*?\beffective(?:\s+date)?\s*:?\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)
LAST_AMENDED_RE = re.compile(r"^.*?\b(?:last\s+)?amended(?:\s+on)?\s*:?\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)
DATE_VALUE_RE = re.compile(
    r"\b(?:\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}|"
    r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},\s*\d{4})\b"
)

DOCUMENT_CHUNK_TYPES: dict[DocumentType, ChunkType] = {
    DocumentType.ZONING_BYLAWS: ChunkType.REGULATION,
    DocumentType.GENERAL_BYLAWS: ChunkType.REGULATION,
    DocumentType.BOARD_OF_HEALTH: ChunkType.REGULATION,
    DocumentType.BUILDING_PERMITS: ChunkType.PROCEDURE_STEP,
    DocumentType.MEETING_MINUTES: ChunkType.MEETING_ITEM,
    DocumentType.BUDGET: ChunkType.FINANCIAL_DATA,
    DocumentType.FEE_SCHEDULES: ChunkType.FINANCIAL_DATA,
}


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def contains_table(text: str) -> bool:
    return TABLE_RE.search(text) is not None


def extract_cross_references(text: str) -> list[str]:
    return _unique([m.group(0).strip() for m in CROSS_REF_RE.finditer(text)])


def extract_keywords(text: str) -> list[str]:
    keywords: list[str] = []
    for pattern in KEYWORD_PATTERNS:
        keywords.extend(m.group(0).lower() for m in pattern.finditer(text))
    return _unique(keywords)


def extract_applies_to(text: str) -> list[str]:
    zones: list[str] = []
    for pattern in ZONE_PATTERNS:
        zones.extend(m.group(0) for m in pattern.finditer(text))
    return _unique(zones)


def detect_chunk_type(text: str, doc_type: DocumentType) -> ChunkType:
    """Tables always win; otherwise the document type decides."""
    if contains_table(text):
        return ChunkType.TABLE
    return DOCUMENT_CHUNK_TYPES.get(doc_type, ChunkType.INFORMATIONAL)


def _find_date(pattern: re.Pattern, text: str) -> Optional[str]:
    for line in pattern.finditer(text):
        value = DATE_VALUE_RE.search(line.group(1))
        if value:
            return value.group(0)
    return None


def extract_document_dates(text: str) -> tuple[Optional[str], Optional[str]]:
    """(effective_date, last_amended) from the head of a document."""
    head = text[:2000]
    return _find_date(EFFECTIVE_DATE_RE, head), _find_date(LAST_AMENDED_RE, head)
