"""Exact token counting with the embedding model's tokenizer."""

from functools import lru_cache

import tiktoken

from townscan.core.config import settings


class Tokenizer:
    """Thin wrapper over a tiktoken encoding."""

    def __init__(self, model: str):
        self.model = model
        self.encoding = tiktoken.encoding_for_model(model)

    def encode(self, text: str) -> list[int]:
        return self.encoding.encode(text, disallowed_special=())

    def decode(self, tokens: list[int]) -> str:
        return self.encoding.decode(tokens)

    def count(self, text: str) -> int:
        return len(self.encode(text))

    def tail(self, text: str, n: int) -> str:
        """Return the last ``n`` tokens of ``text`` decoded back to a string."""
        if n <= 0:
            return ""
        tokens = self.encode(text)
        if len(tokens) <= n:
            return text
        return self.decode(tokens[-n:])


@lru_cache(maxsize=4)
def get_tokenizer(model: str = settings.embedding_model) -> Tokenizer:
    """Get a cached tokenizer for the embedding model."""
    return Tokenizer(model)
