import math

import pytest

from pagedex.search.ranking import (
    accumulate_scores,
    inverse_document_frequency,
    make_snippet,
    rank,
    tf_weight,
)
from pagedex.storage.models import Document, Posting


def make_doc(doc_id: int, created_at: int = 0) -> Document:
    return Document(id=doc_id, url=f"https://example.com/{doc_id}", created_at=created_at)


# ---------- Weights ----------


def test_idf_is_smoothed_and_positive_for_ubiquitous_terms() -> None:
    assert inverse_document_frequency(1, 1) == pytest.approx(math.log(1.5))
    assert inverse_document_frequency(10, 10) > 0


def test_tf_weight_grows_sublinearly() -> None:
    assert tf_weight(1) == 1.0
    assert tf_weight(2) == pytest.approx(1 + math.log(2))
    assert tf_weight(100) < 100


def test_accumulate_scores_counts_repeated_query_terms() -> None:
    inverted = {"rust": [Posting(1, 1)]}
    once = accumulate_scores(["rust"], inverted, 1)
    twice = accumulate_scores(["rust", "rust"], inverted, 1)
    assert twice[1] == pytest.approx(2 * once[1])


def test_accumulate_scores_skips_absent_terms() -> None:
    assert accumulate_scores(["missing"], {"rust": [Posting(1, 1)]}, 1) == {}


# ---------- Ordering ----------


def test_rank_breaks_ties_by_recency() -> None:
    docs = {1: make_doc(1, created_at=100), 2: make_doc(2, created_at=200)}
    inverted = {"rust": [Posting(1, 1), Posting(2, 1)]}
    hits = rank(["rust"], inverted, docs)
    assert [d.id for d, _ in hits] == [2, 1]


def test_rank_truncates_to_limit() -> None:
    docs = {i: make_doc(i, created_at=i) for i in range(1, 6)}
    inverted = {"rust": [Posting(i, i) for i in range(1, 6)]}
    hits = rank(["rust"], inverted, docs, limit=2)
    assert [d.id for d, _ in hits] == [5, 4]


def test_rank_with_non_positive_limit_is_empty() -> None:
    docs = {1: make_doc(1)}
    assert rank(["rust"], {"rust": [Posting(1, 1)]}, docs, limit=0) == []


# ---------- Snippets ----------


def test_snippet_short_content_unchanged() -> None:
    assert make_snippet("short text") == "short text"


def test_snippet_cuts_at_last_whitespace() -> None:
    content = ("word " * 60).strip()
    snippet = make_snippet(content)
    assert len(snippet) <= 200
    assert snippet.endswith("word")
    assert content.startswith(snippet)


def test_snippet_without_whitespace_keeps_window() -> None:
    assert make_snippet("x" * 250) == "x" * 200


def test_snippet_respects_custom_width() -> None:
    assert make_snippet("alpha beta gamma", max_chars=12) == "alpha beta"
