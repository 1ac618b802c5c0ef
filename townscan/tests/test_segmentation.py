"""Tests for the segmenter, packer and oversized splitter."""

import pytest

from townscan.chunking.models import BreakStrategy, ChunkingConfig, Section
from townscan.chunking.packer import pack_parts, pack_section
from townscan.chunking.segmenter import split_sections, split_tables
from townscan.chunking.splitter import hard_split, split_oversized


def test_table_atomic_sections():
    """Test prose and tables alternate without splitting tables."""
    text = (
        "Fees for 2024.\n\n"
        "| Item | Cost |\n| --- | --- |\n| Dog license | $15 |\n\n"
        "Late fees apply after March 31."
    )

    sections = split_sections(text, BreakStrategy.TABLE_ATOMIC)

    assert [s.is_table for s in sections] == [False, True, False]
    assert sections[1].title == "Table"
    assert sections[1].content.startswith("| Item | Cost |")
    assert sections[1].content.endswith("| Dog license | $15 |")


def test_table_atomic_without_tables():
    """Test fallback to a single section when no table is present."""
    sections = split_tables("Just prose.\n\nMore prose.")
    assert [s.content for s in sections] == ["Just prose.\n\nMore prose."]


def test_heading_sections_with_preface():
    """Test heading splits and the leading introduction."""
    text = "Opening remarks.\n\n# 1. Purpose\n\nWhy.\n\n## 1.1 Scope\n\nWhere."

    sections = split_sections(text, BreakStrategy.SECTION_HEADERS)

    assert [s.title for s in sections] == ["Introduction", "1. Purpose", "1.1 Scope"]
    assert [s.section_number for s in sections] == ["", "1", "1.1"]
    assert sections[2].content == "## 1.1 Scope\n\nWhere."


def test_numbered_clauses():
    """Test numbered paragraphs for bylaws without headings."""
    text = "1. Purpose of this bylaw.\n\n2. Definitions apply.\n(a) Lot means a parcel of land."

    sections = split_sections(text, BreakStrategy.NUMBERED_PARAGRAPHS)

    assert [s.section_number for s in sections] == ["1", "2", "a"]
    assert sections[2].title == "(a) Lot means a parcel of land."


def test_paragraph_fallback():
    """Test blank-line splitting when no structure is found."""
    sections = split_sections("First.\n\n\nSecond.\n\nThird.", BreakStrategy.SECTION_BASED)
    assert [s.content for s in sections] == ["First.", "Second.", "Third."]


def test_empty_text_has_no_sections():
    """Test that blank input produces no sections."""
    assert split_sections("   ", BreakStrategy.SECTION_BASED) == []


def test_pack_parts_respects_budget(tokenizer):
    """Test greedy packing under the token budget."""
    parts = [f"Part {i} describes one rule of the town in a sentence or so." for i in range(30)]

    chunks = pack_parts(parts, "\n\n", max_tokens=100, overlap_tokens=16, tokenizer=tokenizer)

    assert len(chunks) > 1
    assert all(tokenizer.count(c) <= 100 for c in chunks)
    assert chunks[0].startswith("Part 0 ")
    assert chunks[-1].endswith("Part 29 describes one rule of the town in a sentence or so.")


def test_pack_parts_overlap_prefix(tokenizer):
    """Test that each chunk starts with the tail of the previous one."""
    parts = [f"Clause {i} sets out a separate obligation for property owners." for i in range(40)]

    chunks = pack_parts(parts, "\n\n", max_tokens=120, overlap_tokens=16, tokenizer=tokenizer)

    for previous, current in zip(chunks, chunks[1:]):
        assert current.startswith(tokenizer.tail(previous, 16).strip())


def test_pack_parts_keeps_oversized_part(tokenizer):
    """Test that a single part above the budget is passed through whole."""
    big = "word " * 300
    chunks = pack_parts(["small", big, "tail"], " ", max_tokens=50, overlap_tokens=0, tokenizer=tokenizer)
    assert big.strip() in chunks


def test_pack_section_keeps_tables_whole(tokenizer):
    """Test that table sections skip packing."""
    rows = "\n".join(f"| Row {i} | Value {i} |" for i in range(100))
    section = Section(title="Table", content=f"| A | B |\n| --- | --- |\n{rows}", is_table=True)
    config = ChunkingConfig(max_tokens=64, overlap_tokens=16, break_strategy=BreakStrategy.TABLE_ATOMIC)

    assert pack_section(section, config, tokenizer) == [section.content]


def test_chunking_config_rejects_large_overlap():
    """Test validation of overlap against budget."""
    with pytest.raises(ValueError):
        ChunkingConfig(max_tokens=100, overlap_tokens=100, break_strategy=BreakStrategy.SECTION_BASED)


def test_split_oversized_passthrough(tokenizer):
    """Test that text within the limit is unchanged."""
    assert split_oversized("Short text.", 50, 5, tokenizer) == ["Short text."]


def test_split_oversized_sentences_in_order(tokenizer):
    """Test sentence-level splitting preserves order and the limit."""
    text = " ".join(f"Sentence number {i} is here." for i in range(300))

    pieces = split_oversized(text, 100, 10, tokenizer)

    assert len(pieces) > 1
    assert all(tokenizer.count(p) <= 100 for p in pieces)
    assert pieces[0].startswith("Sentence number 0 is here.")
    assert pieces[-1].endswith("Sentence number 299 is here.")
    positions = [text.index(p.split(" Sentence")[-1].strip()) for p in pieces]
    assert positions == sorted(positions)


def test_split_oversized_prefers_paragraphs(tokenizer):
    """Test that paragraph breaks are used before sentences."""
    paragraph = " ".join(["Rules for winter parking apply on all streets."] * 10)
    text = "\n\n".join([paragraph] * 4)

    pieces = split_oversized(text, tokenizer.count(paragraph) + 5, 0, tokenizer)

    assert pieces == [paragraph] * 4


def test_split_oversized_rejects_bad_overlap(tokenizer):
    """Test overlap validation."""
    with pytest.raises(ValueError):
        split_oversized("text", 10, 10, tokenizer)


def test_hard_split_bounds(tokenizer):
    """Test raw token cutting on delimiter-free text."""
    text = "abcdefghij" * 200

    pieces = hard_split(text, 50, 5, tokenizer)

    assert len(pieces) > 1
    assert all(0 < tokenizer.count(p) <= 50 for p in pieces)
    assert pieces[0].startswith("abc")
