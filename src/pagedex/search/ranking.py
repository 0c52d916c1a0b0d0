"""TF-IDF scoring over the inverted index.

Scores use a smoothed inverse document frequency, ``ln(1 + N / (1 + df))``,
so a term present in every document still weighs slightly above zero, and a
sub-linear term frequency weight, ``1 + max(0, ln(tf))``. Query terms are
combined with OR semantics: a document matching any term is a candidate.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from pagedex.storage.models import Document, Posting

DEFAULT_LIMIT = 10
DEFAULT_SNIPPET_CHARS = 200


def inverse_document_frequency(n_docs: int, df: int) -> float:
    return math.log(1.0 + n_docs / (1.0 + df))


def tf_weight(tf: int) -> float:
    if tf <= 0:
        return 0.0
    return 1.0 + max(0.0, math.log(tf))


def accumulate_scores(
    terms: Iterable[str],
    inverted: Mapping[str, Sequence[Posting]],
    n_docs: int,
) -> Dict[int, float]:
    """Sum ``tf_weight * idf`` per document over every query term.

    Repeated query terms contribute once per repetition.
    """
    scores: Dict[int, float] = {}
    for term in terms:
        postings = inverted.get(term)
        if not postings:
            continue
        idf = inverse_document_frequency(n_docs, len(postings))
        for doc_id, tf in postings:
            scores[doc_id] = scores.get(doc_id, 0.0) + tf_weight(tf) * idf
    return scores


def rank(
    terms: Sequence[str],
    inverted: Mapping[str, Sequence[Posting]],
    documents: Mapping[int, Document],
    *,
    limit: int = DEFAULT_LIMIT,
) -> List[Tuple[Document, float]]:
    """Return the best `limit` documents for `terms`, best first.

    Ties on score go to the more recent document, then the larger id.
    """
    if not terms or not documents or limit <= 0:
        return []
    scores = accumulate_scores(terms, inverted, len(documents))
    hits = [(documents[doc_id], score) for doc_id, score in scores.items() if doc_id in documents]
    hits.sort(key=lambda hit: (-hit[1], -hit[0].created_at, -hit[0].id))
    return hits[:limit]


def make_snippet(content: str, max_chars: int = DEFAULT_SNIPPET_CHARS) -> str:
    """First `max_chars` characters of `content`, cut back to a word boundary if truncated."""
    if len(content) <= max_chars:
        return content
    window = content[:max_chars]
    for pos in range(len(window) - 1, -1, -1):
        if window[pos].isspace():
            return window[:pos]
    return window
