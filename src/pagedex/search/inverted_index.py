"""In-memory document store and inverted index.

`InvertedIndex` owns the documents keyed by id, the term -> postings map and a
reverse map from document id to the terms it contributed. The reverse map keeps
removal proportional to the size of the removed document rather than to the
whole index.

Posting lists hold at most one posting per document, reference only stored
documents, and are never left empty.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from pagedex.search.ranking import DEFAULT_LIMIT, rank
from pagedex.search.tokenizer import term_frequencies, tokenize
from pagedex.storage.models import Document, Posting, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_ID_PROBES = 1024
# Fallback ids stay within the signed 64-bit range for JSON consumers
_RANDOM_ID_BITS = 63


class InvertedIndex:
    """Document store plus inverted index with TF-IDF search."""

    def __init__(
        self,
        *,
        max_id_probes: int = DEFAULT_MAX_ID_PROBES,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.max_id_probes = max_id_probes
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._documents: Dict[int, Document] = {}
        self._inverted: Dict[str, List[Posting]] = {}
        self._doc_terms: Dict[int, Set[str]] = {}

    # ----- Introspection -----

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def documents(self) -> Iterator[Document]:
        return iter(self._documents.values())

    def terms(self) -> Iterator[str]:
        return iter(self._inverted)

    def postings_for(self, term: str) -> List[Posting]:
        return list(self._inverted.get(term, ()))

    def get_document(self, doc_id: int) -> Optional[Document]:
        return self._documents.get(doc_id)

    def find_by_url(self, url: str) -> List[Document]:
        """Linear scan for documents stored under `url`."""
        return [d for d in self._documents.values() if d.url == url]

    # ----- Identifier allocation -----

    def next_id(self) -> int:
        """Return an unused id seeded from the clock in milliseconds.

        Probes upward at most `max_id_probes` times, then falls back to random ids.
        """
        candidate = max(0, int(self._clock() * 1000))
        for _ in range(self.max_id_probes):
            if candidate not in self._documents:
                return candidate
            candidate += 1
        logger.warning(
            "Id probing exhausted after %d attempts; falling back to random ids",
            self.max_id_probes,
        )
        while True:
            candidate = self._rng.getrandbits(_RANDOM_ID_BITS)
            if candidate not in self._documents:
                return candidate

    # ----- Mutation -----

    def index_document(self, doc: Document) -> None:
        """Insert `doc` and its postings, replacing any document with the same id."""
        if doc.id in self._documents:
            self.remove_document(doc.id)

        freqs = term_frequencies(f"{doc.title} {doc.content}")
        for term, tf in freqs.items():
            self._inverted.setdefault(term, []).append(Posting(doc.id, tf))
        self._doc_terms[doc.id] = set(freqs)
        self._documents[doc.id] = doc

    def remove_document(self, doc_id: int) -> bool:
        """Remove a document and all of its postings. Returns False if it was absent."""
        doc = self._documents.pop(doc_id, None)
        if doc is None:
            return False
        for term in self._doc_terms.pop(doc_id, ()):
            remaining = [p for p in self._inverted.get(term, ()) if p.doc_id != doc_id]
            if remaining:
                self._inverted[term] = remaining
            else:
                self._inverted.pop(term, None)
        return True

    def upsert_by_url(self, url: str, title: str, content: str) -> Document:
        """Index a page under `url`, first removing every document already stored there."""
        for existing in self.find_by_url(url):
            logger.debug("Replacing document %d for %s", existing.id, url)
            self.remove_document(existing.id)

        doc = Document(
            id=self.next_id(),
            url=url,
            title=title,
            content=content,
            created_at=max(0, int(self._clock())),
        )
        self.index_document(doc)
        return doc

    # ----- Query -----

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Tuple[Document, float]]:
        """Rank documents against `query` (OR semantics), best first."""
        terms = tokenize(query)
        return rank(terms, self._inverted, self._documents, limit=limit)

    # ----- Snapshot conversion -----

    def copy(self) -> InvertedIndex:
        """Return an independent copy. Documents and postings are immutable and shared."""
        clone = InvertedIndex(max_id_probes=self.max_id_probes, clock=self._clock, rng=self._rng)
        clone._documents = dict(self._documents)
        clone._inverted = {term: list(pl) for term, pl in self._inverted.items()}
        clone._doc_terms = {doc_id: set(terms) for doc_id, terms in self._doc_terms.items()}
        return clone

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            docs=list(self._documents.values()),
            inverted={term: list(pl) for term, pl in self._inverted.items()},
        )

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, **kwargs) -> InvertedIndex:
        """Restore an index from a snapshot without re-tokenizing.

        Postings for unknown documents and duplicate postings are dropped, and a
        warning reports how many; `rebuild` is the full repair path.
        """
        idx = cls(**kwargs)
        for doc in snapshot.docs:
            idx._documents[doc.id] = doc
            idx._doc_terms.setdefault(doc.id, set())

        dropped = 0
        for term, postings in snapshot.inverted.items():
            kept: List[Posting] = []
            seen: Set[int] = set()
            for posting in postings:
                if posting.doc_id not in idx._documents or posting.doc_id in seen:
                    dropped += 1
                    continue
                seen.add(posting.doc_id)
                kept.append(posting)
                idx._doc_terms[posting.doc_id].add(term)
            if kept:
                idx._inverted[term] = kept

        if dropped:
            logger.warning("Dropped %d inconsistent postings while loading snapshot", dropped)
        return idx
