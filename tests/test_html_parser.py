from pagedex.parsers.html_parser import HTMLParser


def test_parse_content_extracts_title_and_visible_text() -> None:
    html = """
    <html>
      <head><title> Rust Guide </title><style>body { color: red }</style></head>
      <body><h1>Welcome</h1><p>Learn <b>ownership</b>.</p><noscript>enable js</noscript></body>
    </html>
    """
    page = HTMLParser().parse_content(html, metadata={"url": "https://rust.test"})
    assert page.title == "Rust Guide"
    assert "Welcome" in page.text and "ownership" in page.text
    assert "color" not in page.text
    assert "enable js" not in page.text
    assert "Rust Guide" not in page.text
    assert page.metadata == {"url": "https://rust.test"}


def test_parse_content_falls_back_to_first_heading() -> None:
    page = HTMLParser().parse_content("<h1>Release Notes</h1><p>v2 shipped</p>")
    assert page.title == "Release Notes"


def test_parse_content_without_title_or_heading() -> None:
    page = HTMLParser().parse_content("<p>offline copy</p>")
    assert page.title == ""
    assert page.text == "offline copy"
    assert page.metadata == {}
