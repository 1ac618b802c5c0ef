"""Document-type-aware chunking: classify, segment, pack, enforce ceiling, annotate."""

import logging
import uuid
from typing import Iterable, Optional

from townscan.core.config import settings
from townscan.core.utils import compute_content_hash
from townscan.chunking.classifier import detect_document_type, get_chunking_config
from townscan.chunking.metadata import (
    contains_table,
    detect_chunk_type,
    extract_applies_to,
    extract_cross_references,
    extract_document_dates,
    extract_keywords,
)
from townscan.chunking.models import Chunk, ChunkMetadata, DocumentType, FragmentRecord, Section
from townscan.chunking.packer import pack_section
from townscan.chunking.segmenter import split_sections
from townscan.chunking.splitter import split_oversized
from townscan.chunking.tokenizer import Tokenizer, get_tokenizer
from townscan.ingestion.cleaners import strip_boilerplate
from townscan.ingestion.models import ScrapedDocument
from townscan.ingestion.storage import FragmentSink, HashManifest

logger = logging.getLogger(__name__)


def _chunk_id(document_url: str, index: int, content_hash: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{document_url}#{index}:{content_hash}"))


def chunk_document(
    text: str,
    document_url: str,
    document_title: str,
    document_type: Optional[DocumentType] = None,
    document_id: Optional[str] = None,
    department: Optional[str] = None,
    effective_date: Optional[str] = None,
    last_amended: Optional[str] = None,
    document_date: Optional[str] = None,
    tokenizer: Optional[Tokenizer] = None,
    token_ceiling: int = settings.embedding_token_limit,
    ceiling_overlap: int = settings.safety_overlap_tokens,
) -> list[Chunk]:
    """Split a document into fragments that never exceed ``token_ceiling``."""
    cleaned = strip_boilerplate(text)
    if not cleaned:
        return []

    tokenizer = tokenizer or get_tokenizer()
    doc_type = document_type or detect_document_type(document_title, cleaned)
    config = get_chunking_config(doc_type)

    found_effective, found_amended = extract_document_dates(cleaned)
    effective_date = effective_date or found_effective
    last_amended = last_amended or found_amended

    pieces: list[tuple[Section, str]] = []
    for section in split_sections(cleaned, config.break_strategy):
        for packed in pack_section(section, config, tokenizer):
            # Safety net against the embedding limit, whatever the type budget
            for piece in split_oversized(packed, token_ceiling, ceiling_overlap, tokenizer):
                pieces.append((section, piece))

    total = len(pieces)
    chunks: list[Chunk] = []
    for index, (section, piece) in enumerate(pieces):
        content_hash = compute_content_hash(piece)
        metadata = ChunkMetadata(
            chunk_id=_chunk_id(document_url, index, content_hash),
            document_id=document_id,
            document_title=document_title,
            document_type=doc_type,
            department=department,
            document_url=document_url,
            section_number=section.section_number or None,
            section_title=section.title or None,
            effective_date=effective_date,
            last_amended=last_amended,
            document_date=document_date,
            chunk_type=detect_chunk_type(piece, doc_type),
            contains_table=contains_table(piece),
            cross_references=extract_cross_references(piece),
            keywords=extract_keywords(piece),
            applies_to=extract_applies_to(piece),
            chunk_index=index,
            total_chunks=total,
            content_hash=content_hash,
        )
        chunks.append(Chunk(text=piece, metadata=metadata))

    logger.info(f'Chunked "{document_title}" ({doc_type.value}) into {total} chunks')
    return chunks


def chunk_scraped_document(document: ScrapedDocument, tokenizer: Optional[Tokenizer] = None) -> list[Chunk]:
    """Chunk a crawled HTML page or extracted PDF."""
    return chunk_document(
        document.content,
        document_url=document.source_url,
        document_title=document.title,
        document_id=compute_content_hash(document.source_url)[:16],
        department=document.department,
        document_date=document.last_updated,
        tokenizer=tokenizer,
    )


def emit_fragments(
    documents: Iterable[ScrapedDocument],
    sink: FragmentSink,
    manifest: Optional[HashManifest] = None,
    force: bool = False,
) -> tuple[int, int]:
    """Chunk documents into the sink; returns (fragments emitted, unchanged skipped)."""
    emitted = 0
    unchanged = 0
    for document in documents:
        if manifest is not None and not force and manifest.is_unchanged(document):
            logger.debug(f"Unchanged since last run: {document.source_url}")
            unchanged += 1
            continue

        chunks = chunk_scraped_document(document)
        emitted += sink.write(FragmentRecord.from_chunk(chunk) for chunk in chunks)
        if manifest is not None:
            manifest.record(document)

    if manifest is not None:
        manifest.save()
    return emitted, unchanged
