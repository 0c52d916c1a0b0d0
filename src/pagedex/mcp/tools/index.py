"""Page index tools for FastMCP.

Thin wrappers over `PageIndex`; the blocking file I/O runs in a worker thread
so the server loop stays responsive.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from pagedex.search.page_index import PageIndex
from pagedex.storage.models import Document


def _serialize_document(doc: Document) -> Dict[str, Any]:
    return doc.model_dump()


def register_index_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register page index tools on the given FastMCP instance.

    The `get_state` callable should return an object with attribute
    `page_index` holding an opened `PageIndex`.
    """

    def _index() -> PageIndex:
        state = get_state()
        index = getattr(state, "page_index", None) if state is not None else None
        if index is None:
            raise RuntimeError("Page index is not initialized.")
        return index

    @mcp.tool
    async def index_page(url: str, title: str, content: str) -> Dict[str, int]:
        """Index a page's text, replacing any page previously stored under the same URL.

        Parameters
        ----------
        url: str
            Page URL; acts as the replacement key.
        title: str
            Page title.
        content: str
            Visible body text.
        """
        doc_id = await asyncio.to_thread(_index().index_page, url, title, content)
        return {"id": doc_id}

    @mcp.tool
    async def index_html(url: str, html: str) -> Dict[str, int]:
        """Extract title and visible text from raw HTML and index it under `url`."""
        doc_id = await asyncio.to_thread(_index().index_html, url, html)
        return {"id": doc_id}

    @mcp.tool
    async def remove_document(doc_id: int) -> Dict[str, bool]:
        """Remove an indexed page by id."""
        removed = await asyncio.to_thread(_index().remove_document, doc_id)
        return {"removed": removed}

    @mcp.tool
    async def search(query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Search indexed pages; results are ordered best first.

        Each result has: id, url, title, snippet, score, created_at.
        """
        index = _index()
        results = await asyncio.to_thread(lambda: index.search(query, limit=limit))
        return [r.to_dict() for r in results]

    @mcp.tool
    async def get_document(doc_id: int) -> Dict[str, Any]:
        """Return the full stored page for `doc_id` under "document" (null when absent)."""
        doc = await asyncio.to_thread(_index().get_document, doc_id)
        return {"found": doc is not None, "document": _serialize_document(doc) if doc else None}

    @mcp.tool
    async def rebuild_index() -> Dict[str, int]:
        """Re-derive the inverted index from the stored pages and return their count."""
        count = await asyncio.to_thread(_index().rebuild_index)
        return {"count": count}

    @mcp.tool
    async def index_count() -> Dict[str, int]:
        """Return the number of indexed pages."""
        count = await asyncio.to_thread(_index().index_count)
        return {"count": count}
