"""Structural splitting of a document into sections."""

import re

from townscan.chunking.models import BreakStrategy, Section

# Markdown heading: # Heading .. #### Heading
HEADING_RE = re.compile(r"^(#{1,4})\s+(.+)$", re.MULTILINE)

# Numbered clause at line start: 1. / 1.2 / (a) / a) / A.
NUMBERED_CLAUSE_RE = re.compile(r"^(\d+\.[\d.]*|[a-z]\)|[A-Z]\.|\([a-z]\))\s", re.MULTILINE)

# Markdown pipe table: a row, a separator row, then rows up to a blank line or heading
TABLE_RE = re.compile(r"\|.+\|[\s\S]*?\n\|[-:\s|]+\|[\s\S]*?(?=\n\n|\n#|\Z)")

SECTION_NUMBER_RE = re.compile(r"^([\d.]+)\s*")
PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")


def split_tables(text: str) -> list[Section]:
    """Alternate prose and table sections; tables are never divided."""
    sections: list[Section] = []
    position = 0
    for match in TABLE_RE.finditer(text):
        prose = text[position : match.start()].strip()
        if prose:
            sections.append(Section(content=prose))
        sections.append(Section(title="Table", content=match.group(0).strip(), is_table=True))
        position = match.end()

    tail = text[position:].strip()
    if tail:
        sections.append(Section(content=tail))
    return sections


def split_paragraphs(text: str) -> list[Section]:
    return [Section(content=p.strip()) for p in PARAGRAPH_SPLIT_RE.split(text) if p.strip()]


def _split_at(text: str, matches: list[re.Match], title_of, number_of) -> list[Section]:
    sections: list[Section] = []
    preface = text[: matches[0].start()].strip()
    if preface:
        sections.append(Section(title="Introduction", content=preface))

    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        content = text[match.start() : end].strip()
        if content:
            sections.append(
                Section(title=title_of(match, content), section_number=number_of(match), content=content)
            )
    return sections


def split_headings(text: str) -> list[Section]:
    matches = list(HEADING_RE.finditer(text))
    if not matches:
        return []

    def number_of(match: re.Match) -> str:
        number = SECTION_NUMBER_RE.match(match.group(2).strip())
        return number.group(1).rstrip(".") if number else ""

    return _split_at(text, matches, lambda m, _c: m.group(2).strip(), number_of)


def split_numbered_clauses(text: str) -> list[Section]:
    matches = list(NUMBERED_CLAUSE_RE.finditer(text))
    if not matches:
        return []

    def title_of(_match: re.Match, content: str) -> str:
        return content.splitlines()[0][:120]

    return _split_at(text, matches, title_of, lambda m: m.group(1).strip("()."))


def split_sections(text: str, strategy: BreakStrategy) -> list[Section]:
    """Partition a document according to its break strategy."""
    if not text.strip():
        return []

    if strategy == BreakStrategy.TABLE_ATOMIC:
        return split_tables(text) or [Section(content=text.strip())]

    sections = split_headings(text)
    if not sections and strategy == BreakStrategy.NUMBERED_PARAGRAPHS:
        sections = split_numbered_clauses(text)
    if not sections:
        # No structure found: fall back to blank-line paragraphs
        sections = split_paragraphs(text)
    return sections or [Section(content=text.strip())]
