# === FILE: doc_harvester/parser/html_parser.py ===
"""HTML parsing helpers for DocHarvester.

Only two things are pulled out of a documentation page:

* title:   document <title> text or ``""`` if absent.
* content: visible text of <body> (the document minus <head> when there is no body),
  with <script>, <style> and friends removed and outer whitespace trimmed.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup

__all__: Sequence[str] = ("ParsedPage", "parse_html")

_INVISIBLE = ["script", "style", "noscript", "template"]


@dataclass(slots=True)
class ParsedPage:
    """Title and body text of an HTML page."""

    title: str
    text: str


def parse_html(html: str) -> ParsedPage:
    """Parse raw HTML markup into a :class:`ParsedPage`."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    for element in soup(_INVISIBLE):
        element.decompose()
    if soup.body is None:
        # head text never counts as content
        for name in ("head", "title"):
            for element in soup.find_all(name):
                element.decompose()
    text = (soup.body or soup).get_text().strip()

    return ParsedPage(title=title, text=text)
