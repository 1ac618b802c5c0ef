"""Greedy token-bounded packing with trailing-token overlap."""

from typing import Iterable

from townscan.chunking.models import ChunkingConfig, Section
from townscan.chunking.segmenter import PARAGRAPH_SPLIT_RE
from townscan.chunking.tokenizer import Tokenizer


def pack_parts(
    parts: Iterable[str],
    separator: str,
    max_tokens: int,
    overlap_tokens: int,
    tokenizer: Tokenizer,
) -> list[str]:
    """Accumulate parts until the next one would overflow ``max_tokens``.

    Each flushed buffer seeds the next with its last ``overlap_tokens``
    tokens. A single part larger than the budget is kept whole; the
    oversized splitter deals with it.
    """
    chunks: list[str] = []
    current = ""

    for part in parts:
        part = part.strip()
        if not part:
            continue
        candidate = f"{current}{separator}{part}" if current else part
        if current and tokenizer.count(candidate) > max_tokens:
            chunks.append(current.strip())
            overlap = tokenizer.tail(current, overlap_tokens)
            current = f"{overlap}{separator}{part}" if overlap else part
        else:
            current = candidate

    if current.strip():
        chunks.append(current.strip())
    return chunks


def pack_section(section: Section, config: ChunkingConfig, tokenizer: Tokenizer) -> list[str]:
    """Split a section into fragments within the type's token budget."""
    if section.is_table or tokenizer.count(section.content) <= config.max_tokens:
        return [section.content]

    return pack_parts(
        PARAGRAPH_SPLIT_RE.split(section.content),
        "\n\n",
        config.max_tokens,
        config.overlap_tokens,
        tokenizer,
    )
