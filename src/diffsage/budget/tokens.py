"""Heuristic token estimation for mixed-script text."""

from __future__ import annotations


class TokenEstimator:
    """Estimate token counts without a tokenizer.

    Characters in a dense script (Hangul syllables) are counted as one token
    each; every other character is counted as a quarter token, rounded down
    over the whole text. Budget constants elsewhere are tuned to this ratio.
    """

    DENSE_RANGES: tuple[tuple[int, int], ...] = ((0xAC00, 0xD7A3),)
    CHARS_PER_TOKEN = 4

    @classmethod
    def is_dense(cls, ch: str) -> bool:
        code = ord(ch)
        return any(lo <= code <= hi for lo, hi in cls.DENSE_RANGES)

    @classmethod
    def count_chars(cls, text: str) -> tuple[int, int]:
        """Return (dense, other) character counts."""
        dense = sum(1 for ch in text if cls.is_dense(ch))
        return dense, len(text) - dense

    @classmethod
    def from_counts(cls, dense: int, other: int) -> int:
        return dense + other // cls.CHARS_PER_TOKEN

    @classmethod
    def estimate(cls, text: str) -> int:
        """Estimate token count for a string."""
        return cls.from_counts(*cls.count_chars(text))
