"""Last-resort splitting that enforces the embedding model's token ceiling."""

import logging
import re

from townscan.chunking.packer import pack_parts
from townscan.chunking.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Progressively finer delimiters and the separator used to rejoin parts
DELIMITERS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\n\n+"), "\n\n"),
    (re.compile(r"\n"), "\n"),
    (re.compile(r"(?<=[.!?])\s+"), " "),
]


def hard_split(text: str, limit: int, overlap: int, tokenizer: Tokenizer) -> list[str]:
    """Cut at raw token boundaries; always terminates."""
    tokens = tokenizer.encode(text)
    pieces: list[str] = []
    start = 0
    while start < len(tokens):
        end = min(start + limit, len(tokens))
        piece = tokenizer.decode(tokens[start:end]).strip()
        # Decoding a cut multi-byte sequence can re-encode longer
        while end - start > 1 and tokenizer.count(piece) > limit:
            end -= 1
            piece = tokenizer.decode(tokens[start:end]).strip()
        if piece:
            pieces.append(piece)
        if end >= len(tokens):
            break
        start = max(end - overlap, start + 1)
    return pieces


def _split_once(text: str, size: int, limit: int, overlap: int, tokenizer: Tokenizer) -> list[str]:
    """Try each delimiter; return pieces only if every piece is smaller than the input."""
    for delimiter, separator in DELIMITERS:
        parts = [p for p in delimiter.split(text) if p.strip()]
        if len(parts) <= 1:
            continue
        pieces = pack_parts(parts, separator, limit, overlap, tokenizer)
        if len(pieces) > 1 and all(tokenizer.count(p) < size for p in pieces):
            return pieces
    return []


def split_oversized(text: str, limit: int, overlap: int, tokenizer: Tokenizer) -> list[str]:
    """Split ``text`` until every piece is within ``limit`` tokens.

    Uses an explicit work stack instead of recursion so pathological inputs
    cannot exhaust the call stack. Output order follows the input text.
    """
    if overlap >= limit:
        raise ValueError("overlap must be smaller than limit")

    out: list[str] = []
    stack = [text]
    while stack:
        current = stack.pop()
        size = tokenizer.count(current)
        if size <= limit:
            out.append(current)
            continue

        pieces = _split_once(current, size, limit, overlap, tokenizer)
        if pieces:
            stack.extend(reversed(pieces))
        else:
            logger.debug(f"Hard-splitting {size} tokens with no usable delimiter")
            out.extend(hard_split(current, limit, overlap, tokenizer))
    return out
