"""Abstract search interface for indexing and querying pages.

Defines the operation set offered to collaborators, enabling alternative
backends and test doubles via a common contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from pagedex.storage.models import Document


@dataclass(slots=True)
class SearchResult:
    """Represents a single search hit."""

    id: int
    url: str
    title: str
    snippet: str
    score: float
    created_at: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BaseSearch(ABC):
    """Abstract interface for page index implementations."""

    @abstractmethod
    def index_page(self, url: str, title: str, content: str) -> int:
        """Create or replace the document stored under `url` and return its id."""

    @abstractmethod
    def remove_document(self, doc_id: int) -> bool:
        """Remove a document by id. Returns False if it was not indexed."""

    @abstractmethod
    def search(self, query: str, *, limit: Optional[int] = None) -> List[SearchResult]:
        """Execute a search query and return ranked results."""
        raise NotImplementedError

    @abstractmethod
    def get_document(self, doc_id: int) -> Optional[Document]:
        """Return the stored document, or None."""

    @abstractmethod
    def rebuild_index(self) -> int:
        """Re-derive the inverted index from the stored documents and return their count."""

    @abstractmethod
    def index_count(self) -> int:
        """Return the number of indexed documents."""
