"""Data models for document segmentation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentType(str, Enum):
    """Document categories, each with its own chunking parameters."""

    ZONING_BYLAWS = "zoning_bylaws"
    GENERAL_BYLAWS = "general_bylaws"
    BUILDING_PERMITS = "building_permits"
    FEE_SCHEDULES = "fee_schedules"
    BUDGET = "budget"
    BOARD_OF_HEALTH = "board_of_health"
    PUBLIC_WORKS = "public_works"
    MEETING_MINUTES = "meeting_minutes"
    PLANNING_BOARD = "planning_board"
    LOCAL_BUSINESS = "local_business"
    NEWS = "news"
    GENERAL = "general"


class BreakStrategy(str, Enum):
    """How a document is partitioned into sections before packing."""

    SECTION_HEADERS = "section_headers"
    NUMBERED_PARAGRAPHS = "numbered_paragraphs"
    PROCEDURAL_STEPS = "procedural_steps"
    TABLE_ATOMIC = "table_atomic"
    NARRATIVE_DATA_SEPARATION = "narrative_data_separation"
    TOPIC_BASED = "topic_based"
    SECTION_BASED = "section_based"
    AGENDA_ITEMS = "agenda_items"
    ITEM_PROJECT_SEPARATION = "item_project_separation"
    BUSINESS_PROFILE = "business_profile"
    ARTICLE_PARAGRAPHS = "article_paragraphs"


class ChunkType(str, Enum):
    REGULATION = "regulation"
    TABLE = "table"
    PROCEDURE_STEP = "procedure_step"
    MEETING_ITEM = "meeting_item"
    FINANCIAL_DATA = "financial_data"
    INFORMATIONAL = "informational"


class ChunkingConfig(BaseModel):
    """Token budget and break strategy for one document type."""

    model_config = ConfigDict(frozen=True)

    max_tokens: int = Field(..., gt=0)
    overlap_tokens: int = Field(..., ge=0)
    break_strategy: BreakStrategy

    @model_validator(mode="after")
    def _overlap_below_max(self) -> "ChunkingConfig":
        if self.overlap_tokens >= self.max_tokens:
            raise ValueError("overlap_tokens must be smaller than max_tokens")
        return self


class Section(BaseModel):
    """A coarse structural piece of a document."""

    title: str = ""
    section_number: str = ""
    content: str
    is_table: bool = False


class ChunkMetadata(BaseModel):
    """Metadata stored alongside each fragment."""

    chunk_id: str = ""
    document_id: Optional[str] = None
    document_title: str
    document_type: DocumentType
    department: Optional[str] = None
    document_url: str
    section_number: Optional[str] = None
    section_title: Optional[str] = None
    effective_date: Optional[str] = None
    last_amended: Optional[str] = None
    document_date: Optional[str] = None
    chunk_type: ChunkType = ChunkType.INFORMATIONAL
    contains_table: bool = False
    cross_references: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    applies_to: list[str] = Field(default_factory=list)
    chunk_index: int = 0
    total_chunks: int = 0
    content_hash: str = ""


class Chunk(BaseModel):
    """A token-bounded fragment of a document."""

    model_config = ConfigDict(frozen=True)

    text: str
    metadata: ChunkMetadata


class FragmentRecord(BaseModel):
    """What the embedding/storage collaborator receives per fragment."""

    source_url: str
    title: str
    fragment_text: str
    fragment_metadata: ChunkMetadata

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "FragmentRecord":
        return cls(
            source_url=chunk.metadata.document_url,
            title=chunk.metadata.document_title,
            fragment_text=chunk.text,
            fragment_metadata=chunk.metadata,
        )
