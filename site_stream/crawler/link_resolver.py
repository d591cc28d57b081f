# site_stream/crawler/link_resolver.py
"""
Link discovery and URL canonicalization utilities for SiteStream.
"""
from __future__ import annotations

from typing import Container, Dict, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

_DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443}


def _netloc(scheme: str, url: str) -> Optional[str]:
    parts = urlsplit(url)
    host = parts.hostname
    if not host:
        return None
    if ":" in host:
        host = f"[{host}]"
    port = parts.port  # ValueError on a malformed port
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        host = f"{host}:{port}"
    userinfo, sep, _ = parts.netloc.rpartition("@")
    return f"{userinfo}{sep}{host}"


def canonicalize(url: str) -> Optional[str]:
    """
    Serialize an absolute URL the way a browser does.

    Lowercases scheme and host, drops the default port and turns an empty
    path into ``/``. Query and fragment are kept. Returns None for anything
    without a scheme and host; raises ValueError for malformed authorities.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if not scheme or not parts.netloc:
        return None
    netloc = _netloc(scheme, url.strip())
    if netloc is None:
        return None
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of an absolute http(s) URL."""
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ValueError(f"Unsupported URL scheme: {url!r}")
    netloc = _netloc(scheme, url.strip())
    if netloc is None:
        raise ValueError(f"URL has no host: {url!r}")
    return f"{scheme}://{netloc.rpartition('@')[2]}"


def resolve_link(href: str, scope: str) -> Optional[str]:
    """Resolve *href* against the scope origin. None if it cannot be resolved."""
    try:
        return canonicalize(urljoin(scope, href.strip()))
    except ValueError:
        return None


def in_scope(url: str, scope: str) -> bool:
    """Prefix containment against the scope origin string."""
    return url.startswith(scope)


def discover_links(document: BeautifulSoup, scope: str, visited: Container[str]) -> List[str]:
    """
    Collect in-scope candidate URLs from every ``<a href>`` in document order.

    Links are resolved against *scope* (the seed origin), not against the page
    URL. Already visited URLs are dropped, compared in resolved form.
    """
    links: List[str] = []
    for tag in document.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str) or not href_val.strip():
            continue
        absolute = resolve_link(href_val, scope)
        if absolute is None or not in_scope(absolute, scope):
            continue
        if absolute in visited:
            continue
        links.append(absolute)
    return list(dict.fromkeys(links))


__all__ = ["canonicalize", "origin_of", "resolve_link", "in_scope", "discover_links"]
