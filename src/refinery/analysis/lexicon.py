"""Shared lexical helpers: word/sentence counting and the token estimator."""

from __future__ import annotations

import math
import re

_SENTENCE_SPLIT = re.compile(r"[.!?]+")

TOKENS_PER_WORD = 1.3


def word_count(text: str) -> int:
    return len(text.split())


def sentences(text: str) -> list[str]:
    """Split on runs of ``.!?`` and drop blank fragments."""
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def sentence_count(text: str) -> int:
    return len(sentences(text))


def avg_words_per_sentence(text: str) -> float:
    return word_count(text) / max(1, sentence_count(text))


def estimate_tokens(text: str) -> int:
    """Fixed approximation, not a tokenizer: ``ceil(words * 1.3)``."""
    return math.ceil(word_count(text) * TOKENS_PER_WORD)


def count_matches(pattern: re.Pattern[str], text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


def keywords(*words: str) -> re.Pattern[str]:
    """Case-insensitive whole-word alternation."""
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


def round_half_up(value: float) -> int:
    """Round halves up; builtin ``round()`` rounds half to even."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
