"""Pydantic models for the persisted search index.

Defines the Document record, the Posting pair and the Snapshot that is
written to disk as a single JSON file.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


U32_MAX = 2**32 - 1


class Posting(NamedTuple):
    """A term occurrence: (document id, term frequency). Serialized as a two-element array."""

    doc_id: Annotated[int, Field(ge=0)]
    term_frequency: Annotated[int, Field(ge=1, le=U32_MAX)]


class Document(BaseModel):
    """Represents an indexed page."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    url: str
    title: str = ""
    content: str = ""
    # Unix seconds
    created_at: int = Field(default=0, ge=0)


class Snapshot(BaseModel):
    """The complete persisted state: documents plus the inverted index."""

    model_config = ConfigDict(extra="ignore")

    docs: List[Document] = Field(default_factory=list)
    inverted: Dict[str, List[Posting]] = Field(default_factory=dict)


class DocumentList(BaseModel):
    """Only the `docs` section of a snapshot file; used when rebuilding."""

    model_config = ConfigDict(extra="ignore")

    docs: List[Document] = Field(default_factory=list)
