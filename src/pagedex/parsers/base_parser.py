"""Abstract base classes and data structures for page parsers.

Parsers turn raw page markup into the plain title and text that the index
stores. They never fetch anything; callers hand them the markup they already
have.

Concrete implementations should subclass `BaseParser` and implement
`parse_content()`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(slots=True)
class ParsedPage:
    """Container for parsed page outputs."""

    title: str = ""
    text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseParser(ABC):
    """Abstract parser interface."""

    @abstractmethod
    def parse_content(
        self, content: str, *, metadata: Optional[Dict[str, Any]] = None
    ) -> ParsedPage:
        """Parse in-memory markup and return a `ParsedPage`.

        Implementations should raise `pagedex.exceptions.ParsingError` on failure.
        """
        raise NotImplementedError
