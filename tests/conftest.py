# File: tests/conftest.py
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Union

import pytest
from site_stream.config import Settings
from site_stream.crawler.renderer import NavigationError


class ScriptedRenderer:
    """
    In-memory renderer: serves HTML from a dict, fails for URLs missing from it.
    Records every navigate() call and whether close() ran.
    """

    def __init__(self, pages: Dict[str, str], delay: float = 0.0, explode_on: Optional[str] = None) -> None:
        self.pages = pages
        self.delay = delay
        self.explode_on = explode_on
        self.navigated: List[str] = []
        self.started = False
        self.closed = False
        self._current: Optional[str] = None

    async def __aenter__(self) -> "ScriptedRenderer":
        self.started = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def navigate(self, url: str, *, wait_until: str, timeout: float) -> None:
        self.navigated.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url == self.explode_on:
            raise RuntimeError("renderer crashed")
        if url not in self.pages:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        self._current = url

    async def content(self) -> str:
        assert self._current is not None
        return self.pages[self._current]

    async def close(self) -> None:
        self.closed = True


class RendererPool:
    """Renderer factory that remembers every instance it created."""

    def __init__(self, pages: Dict[str, str], **kwargs) -> None:
        self.pages = pages
        self.kwargs = kwargs
        self.instances: List[ScriptedRenderer] = []

    def __call__(self) -> ScriptedRenderer:
        renderer = ScriptedRenderer(self.pages, **self.kwargs)
        self.instances.append(renderer)
        return renderer


class EventRecorder:
    def __init__(self) -> None:
        self.events: List[Dict[str, Union[str, list]]] = []

    async def __call__(self, event) -> None:
        self.events.append(event)

    @property
    def visiting(self) -> List[str]:
        return [e["visiting"] for e in self.events if "visiting" in e]


@pytest.fixture()
def settings() -> Settings:
    """Return settings suitable for in-process crawl tests."""
    return Settings(max_pages=50, navigation_timeout=2.0, keepalive_interval=5.0, renderer="http")


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def make_pool():
    """Factory fixture: ``make_pool(pages, delay=..., explode_on=...)``."""
    return RendererPool
