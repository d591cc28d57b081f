# site_stream/crawler/renderer.py
"""
Page renderers: navigate to a URL and hand back the rendered HTML.

Every crawl session owns exactly one renderer. Renderers are async context
managers: entering starts the underlying browser or HTTP session, leaving
releases it on every exit path.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from site_stream.config import Settings

logger = logging.getLogger("SiteStream")


class NavigationError(Exception):
    """Navigation to a URL failed (timeout, DNS, network, browser error)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class PageRenderer(Protocol):
    async def __aenter__(self) -> "PageRenderer": ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def navigate(self, url: str, *, wait_until: str, timeout: float) -> None: ...

    async def content(self) -> str: ...

    async def close(self) -> None: ...


RendererFactory = Callable[[], PageRenderer]


class PlaywrightRenderer:
    """Headless Chromium with one page, driven through Playwright."""

    def __init__(self, *, headless: bool = True, user_agent: Optional[str] = None) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> PlaywrightRenderer:
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=["--disable-gpu", "--no-sandbox", "--disable-dev-shm-usage"],
        )
        self._page = await self._browser.new_page(user_agent=self.user_agent)

    async def navigate(self, url: str, *, wait_until: str = "networkidle", timeout: float = 30.0) -> None:
        if self._page is None:
            raise RuntimeError("Renderer not started")
        try:
            await self._page.goto(url, wait_until=wait_until, timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc

    async def content(self) -> str:
        if self._page is None:
            raise RuntimeError("Renderer not started")
        return await self._page.content()

    async def close(self) -> None:
        if self._browser is not None:
            logger.info("Closing browser…")
            await self._browser.close()
            self._browser = None
            self._page = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


class HttpRenderer:
    """Plain HTTP renderer without JavaScript; the body is taken as is."""

    def __init__(self, *, user_agent: Optional[str] = None) -> None:
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None
        self._content: Optional[str] = None

    async def __aenter__(self) -> HttpRenderer:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        self.session = ClientSession(headers=headers, raise_for_status=False)

    async def navigate(self, url: str, *, wait_until: str = "load", timeout: float = 30.0) -> None:
        # wait_until has no meaning without a browser
        if not self.session:
            raise RuntimeError("Session not initialized")
        self._content = None
        try:
            async with self.session.get(url, timeout=ClientTimeout(total=timeout)) as resp:
                # like a browser, error pages are still rendered pages
                self._content = await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise NavigationError(url, f"timeout after {timeout:g}s") from exc
        except (ClientError, ValueError) as exc:
            raise NavigationError(url, str(exc) or type(exc).__name__) from exc

    async def content(self) -> str:
        if self._content is None:
            raise RuntimeError("No page loaded")
        return self._content

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None


def renderer_factory(settings: Settings) -> RendererFactory:
    """Return a zero-argument constructor for the configured renderer."""
    if settings.renderer == "http":
        return lambda: HttpRenderer(user_agent=settings.user_agent)
    return lambda: PlaywrightRenderer(headless=settings.headless, user_agent=settings.user_agent)


__all__ = [
    "NavigationError",
    "PageRenderer",
    "RendererFactory",
    "PlaywrightRenderer",
    "HttpRenderer",
    "renderer_factory",
]
