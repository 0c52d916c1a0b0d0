"""Long-lived page index service.

`PageIndex` owns the in-memory `InvertedIndex`, loads it from the snapshot
file on first use and persists it after each mutation (or on `flush()` when
`flush_on_mutation` is off). All public operations hold one re-entrant lock,
so callers in the same process never overwrite each other's changes.

With flush-on-mutation, a mutation is applied to a copy of the index; the
copy replaces the live index only after the snapshot was written, so a failed
write leaves the service exactly as it was before the call.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from pagedex.config import IndexConfig
from pagedex.exceptions import SearchError, SnapshotCorruptionError
from pagedex.parsers.base_parser import BaseParser
from pagedex.parsers.html_parser import HTMLParser
from pagedex.search.base_search import BaseSearch, SearchResult
from pagedex.search.inverted_index import DEFAULT_MAX_ID_PROBES, InvertedIndex
from pagedex.search.ranking import DEFAULT_LIMIT, DEFAULT_SNIPPET_CHARS, make_snippet
from pagedex.storage.models import Document
from pagedex.storage.snapshot import LoadOutcome, SnapshotStore

logger = logging.getLogger(__name__)

CorruptionHook = Callable[[SnapshotCorruptionError], None]


class PageIndex(BaseSearch):
    """Disk-backed full-text index of visited pages."""

    def __init__(
        self,
        store: SnapshotStore,
        *,
        flush_on_mutation: bool = True,
        default_limit: int = DEFAULT_LIMIT,
        snippet_chars: int = DEFAULT_SNIPPET_CHARS,
        max_id_probes: int = DEFAULT_MAX_ID_PROBES,
        clock: Callable[[], float] = time.time,
        on_corruption: Optional[CorruptionHook] = None,
        parser: Optional[BaseParser] = None,
    ) -> None:
        self.store = store
        self.flush_on_mutation = flush_on_mutation
        self.default_limit = default_limit
        self.snippet_chars = snippet_chars
        self.max_id_probes = max_id_probes
        self._clock = clock
        self._on_corruption = on_corruption
        self._parser = parser or HTMLParser()
        self._lock = threading.RLock()
        self._index: Optional[InvertedIndex] = None
        self._load_outcome: Optional[LoadOutcome] = None
        self._dirty = False

    @classmethod
    def from_config(cls, cfg: IndexConfig, **kwargs) -> PageIndex:
        """Build a service from the `index` section of the settings."""
        return cls(
            SnapshotStore(cfg.path),
            flush_on_mutation=cfg.flush_on_mutation,
            default_limit=cfg.default_limit,
            snippet_chars=cfg.snippet_chars,
            max_id_probes=cfg.max_id_probes,
            **kwargs,
        )

    # ----- Lifecycle -----

    def open(self) -> LoadOutcome:
        """Load the snapshot if not loaded yet and return how the load went."""
        with self._lock:
            if self._load_outcome is None:
                outcome = self.store.load()
                self._index = InvertedIndex.from_snapshot(outcome.snapshot, **self._index_kwargs())
                self._load_outcome = outcome
                self._dirty = False
                logger.debug(
                    "Loaded %d documents from %s (%s)", len(self._index), self.store.path, outcome.status
                )
                if outcome.corruption is not None and self._on_corruption is not None:
                    self._on_corruption(outcome.corruption)
            return self._load_outcome

    @property
    def load_outcome(self) -> Optional[LoadOutcome]:
        return self._load_outcome

    @property
    def dirty(self) -> bool:
        return self._dirty

    def flush(self) -> bool:
        """Write pending in-memory changes. Returns True if anything was written."""
        with self._lock:
            if not self._dirty or self._index is None:
                return False
            self.store.save(self._index.to_snapshot())
            self._dirty = False
            logger.debug("Flushed %d documents to %s", len(self._index), self.store.path)
            return True

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> PageIndex:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ----- Operations -----

    def index_page(self, url: str, title: str, content: str) -> int:
        with self._lock:
            working = self._working_copy()
            doc = working.upsert_by_url(url, title, content)
            self._commit(working)
            logger.debug("Indexed %s as document %d", url, doc.id)
            return doc.id

    def index_html(self, url: str, html: str) -> int:
        """Extract title and visible text from `html` and index them under `url`."""
        page = self._parser.parse_content(html, metadata={"url": url})
        return self.index_page(url, page.title, page.text)

    def remove_document(self, doc_id: int) -> bool:
        with self._lock:
            if doc_id not in self._live():
                return False
            working = self._working_copy()
            working.remove_document(doc_id)
            self._commit(working)
            return True

    def search(self, query: str, *, limit: Optional[int] = None) -> List[SearchResult]:
        if limit is None:
            limit = self.default_limit
        elif isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise SearchError(f"limit must be a non-negative integer, got {limit!r}")
        with self._lock:
            hits = self._live().search(query, limit)
        return [
            SearchResult(
                id=doc.id,
                url=doc.url,
                title=doc.title,
                snippet=make_snippet(doc.content, self.snippet_chars),
                score=score,
                created_at=doc.created_at,
            )
            for doc, score in hits
        ]

    def get_document(self, doc_id: int) -> Optional[Document]:
        with self._lock:
            return self._live().get_document(doc_id)

    def rebuild_index(self) -> int:
        """Re-tokenize every stored document into a fresh inverted index.

        Reads only the persisted document list; read and decode failures
        propagate to the caller.
        """
        with self._lock:
            self.flush()
            docs = self.store.read_documents()
            fresh = InvertedIndex(**self._index_kwargs())
            for doc in docs:
                fresh.index_document(doc)
            snapshot = fresh.to_snapshot()
            if self.store.exists():
                self.store.save(snapshot)
            self._index = fresh
            self._load_outcome = LoadOutcome(snapshot=snapshot, status="ok")
            self._dirty = False
            logger.info("Rebuilt index with %d documents", len(fresh))
            return len(fresh)

    def index_count(self) -> int:
        with self._lock:
            return len(self._live())

    # ----- Internals -----

    def _index_kwargs(self) -> dict:
        return {"max_id_probes": self.max_id_probes, "clock": self._clock}

    def _live(self) -> InvertedIndex:
        if self._index is None:
            self.open()
        assert self._index is not None
        return self._index

    def _working_copy(self) -> InvertedIndex:
        live = self._live()
        return live.copy() if self.flush_on_mutation else live

    def _commit(self, working: InvertedIndex) -> None:
        if self.flush_on_mutation:
            self.store.save(working.to_snapshot())
            self._index = working
            self._dirty = False
        else:
            self._index = working
            self._dirty = True
