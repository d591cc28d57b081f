# site_stream/crawler/extractor.py
"""
Structured text extraction: turns a rendered document into titled sections.
"""
from __future__ import annotations

from typing import List, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_stream.crawler.models import Section

HEADING_TAGS: Sequence[str] = ("h1", "h2", "h3", "h4", "h5", "h6")
CONTENT_TAGS: Sequence[str] = (*HEADING_TAGS, "p", "span", "li", "pre", "code")


def parse_document(html: Union[str, bytes]) -> BeautifulSoup:
    """Parse serialized HTML into a queryable document."""
    return BeautifulSoup(html, "html.parser")


def extract_sections(document: BeautifulSoup) -> List[Section]:
    """
    Walk content-bearing elements in document order and group them by heading.

    A heading closes the current section only if it holds content, so
    consecutive headings collapse and a trailing heading yields nothing.
    """
    sections: List[Section] = []
    current = Section()
    for element in document.find_all(CONTENT_TAGS):
        if not isinstance(element, Tag):
            continue
        text = element.get_text().strip()
        if not text:
            continue
        tag = element.name.lower()
        if tag in HEADING_TAGS:
            if current.content:
                sections.append(current)
            current = Section(title=text)
        else:
            current.content.append((tag, text))
    if current.content:
        sections.append(current)
    return sections


__all__ = ["CONTENT_TAGS", "HEADING_TAGS", "parse_document", "extract_sections"]
