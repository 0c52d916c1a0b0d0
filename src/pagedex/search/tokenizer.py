"""Tokenizer shared by indexing and querying.

Text is split on every non-alphanumeric character, lowercased, and filtered
against a short stop-word list. Single-character terms are dropped.
"""

from __future__ import annotations

from collections import Counter
from typing import List

STOPWORDS = frozenset(
    {
        "the", "and", "or", "to", "of", "a", "in", "on",
        "for", "with", "is", "it", "by", "an", "be",
    }
)

MIN_TERM_LENGTH = 2


def _keep(term: str) -> bool:
    return len(term) >= MIN_TERM_LENGTH and term not in STOPWORDS


def tokenize(text: str) -> List[str]:
    """Return the index terms of `text` in order, repeats included."""
    tokens: List[str] = []
    current: List[str] = []
    for ch in text:
        if ch.isalnum():
            current.append(ch.lower())
            continue
        if current:
            term = "".join(current)
            if _keep(term):
                tokens.append(term)
            current = []
    if current:
        term = "".join(current)
        if _keep(term):
            tokens.append(term)
    return tokens


def term_frequencies(text: str) -> Counter[str]:
    """Count occurrences of each index term in `text`."""
    return Counter(tokenize(text))
