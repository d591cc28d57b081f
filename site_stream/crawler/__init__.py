# File: site_stream/crawler/__init__.py
"""site_stream.crawler: обход сайта, извлечение секций и рендереры страниц."""

from __future__ import annotations

from site_stream.crawler.models import PageRecord, Section
from site_stream.crawler.renderer import NavigationError, renderer_factory
from site_stream.crawler.session import CrawlSession

__all__ = ["CrawlSession", "NavigationError", "PageRecord", "Section", "renderer_factory"]
