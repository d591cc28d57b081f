# site_stream/server/protocol.py
"""
Wire protocol of the crawl channel: one JSON object per message.

Inbound:  ``{"url": "<seed>"}``
Outbound: ``{"status": "connected"}``, ``{"visiting": url}``,
``{"scrapedData": [...]}`` and ``{"error": message}``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Union

from site_stream.crawler.link_resolver import origin_of
from site_stream.crawler.models import PageRecord

Event = Dict[str, Any]

UNEXPECTED_ERROR = "An unexpected error occurred."


class MalformedRequestError(ValueError):
    """Inbound payload is not valid JSON or carries no usable URL."""


@dataclass(slots=True, frozen=True)
class CrawlRequest:
    url: str


def parse_request(raw: Union[str, bytes]) -> CrawlRequest:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRequestError("Invalid JSON payload") from exc
    url = payload.get("url") if isinstance(payload, dict) else None
    if not url or not isinstance(url, str):
        raise MalformedRequestError("URL is required")
    try:
        origin_of(url)
    except ValueError as exc:
        raise MalformedRequestError(f"Invalid URL: {url}") from exc
    return CrawlRequest(url=url)


def connected_event() -> Event:
    return {"status": "connected"}


def scraped_data_event(records: Iterable[PageRecord]) -> Event:
    return {"scrapedData": [r.to_dict() for r in records]}


def error_event(message: str) -> Event:
    return {"error": message}


__all__ = [
    "Event",
    "CrawlRequest",
    "MalformedRequestError",
    "UNEXPECTED_ERROR",
    "parse_request",
    "connected_event",
    "scraped_data_event",
    "error_event",
]
