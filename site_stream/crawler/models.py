# site_stream/crawler/models.py
"""
Data models for the SiteStream crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(slots=True)
class Section:
    """Block of content under one heading; ``title`` is empty before the first heading."""

    title: str = ""
    content: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": [{"tag": tag, "text": text} for tag, text in self.content],
        }


@dataclass(slots=True)
class PageRecord:
    """Extracted sections of one successfully rendered page."""

    url: str
    sections: List[Section] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "data": [s.to_dict() for s in self.sections]}
