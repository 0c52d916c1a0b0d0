"""HTML parser for turning a rendered page's markup into indexable text.

Script, style and template elements are dropped; the `<title>` element (or the
first `<h1>` when there is none) becomes the page title.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from bs4 import BeautifulSoup  # type: ignore[import-untyped]

from pagedex.exceptions import ParsingError

from .base_parser import BaseParser, ParsedPage

_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


class HTMLParser(BaseParser):
    """Parser for HTML content."""

    def parse_content(
        self, content: str, *, metadata: Optional[Dict[str, Any]] = None
    ) -> ParsedPage:
        try:
            soup = BeautifulSoup(content, "html.parser")
        except Exception as exc:  # bs4 surfaces parser failures as assorted types
            raise ParsingError(f"Failed to parse HTML: {exc}") from exc

        for tag in soup.find_all(_INVISIBLE_TAGS):
            tag.decompose()

        title = ""
        if soup.title is not None:
            title = soup.title.get_text(" ", strip=True)
            soup.title.decompose()
        if not title:
            h1 = soup.find("h1")
            if h1 is not None:
                title = h1.get_text(" ", strip=True)

        text = soup.get_text(" ", strip=True)
        return ParsedPage(title=title, text=text, metadata=metadata or {})
