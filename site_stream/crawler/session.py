# === FILE: site_stream/crawler/session.py ===
from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from site_stream.config import Settings
from site_stream.crawler.extractor import extract_sections, parse_document
from site_stream.crawler.frontier import Frontier, VisitedLedger
from site_stream.crawler.link_resolver import canonicalize, discover_links, origin_of
from site_stream.crawler.models import PageRecord
from site_stream.crawler.renderer import NavigationError, RendererFactory
from site_stream.logger import session_logger

__all__ = ("CrawlSession", "EmitFn")

EmitFn = Callable[[Dict[str, Any]], Awaitable[None]]


async def _discard(event: Dict[str, Any]) -> None:
    return None


class CrawlSession:
    """Последовательный BFS-обход одного origin с собственным рендерером."""

    def __init__(
        self,
        seed_url: str,
        settings: Settings,
        renderer_factory: RendererFactory,
        emit: Optional[EmitFn] = None,
    ) -> None:
        self.scope: str = origin_of(seed_url)
        self.seed_url: str = canonicalize(seed_url) or seed_url
        self.settings = settings
        self.max_pages: int = settings.max_pages
        self.frontier = Frontier([self.seed_url])
        self.visited = VisitedLedger()
        self.failed: Set[str] = set()
        self.results: List[PageRecord] = []
        self._renderer_factory = renderer_factory
        self._emit: EmitFn = emit or _discard
        self.logger = session_logger(self.seed_url)

    async def run(self) -> List[PageRecord]:
        """
        Обходит страницы, пока не опустеет очередь или не будет достигнут max_pages.

        Ошибки навигации пропускают URL; любое другое исключение (в том числе
        закрытый канал) прерывает сессию. Рендерер закрывается на любом выходе.
        """
        self.logger.info("Старт обхода: %s (scope %s)", self.seed_url, self.scope)
        start = time.monotonic()
        async with self._renderer_factory() as renderer:
            while self.frontier and len(self.visited) < self.max_pages:
                url = self.frontier.pop()
                if url in self.visited or url in self.failed:
                    continue

                self.logger.info("Обход URL: %s", url)
                await self._emit({"visiting": url})

                try:
                    await renderer.navigate(
                        url,
                        wait_until=self.settings.wait_until,
                        timeout=self.settings.navigation_timeout,
                    )
                except NavigationError as e:
                    self.logger.warning("Не удалось открыть %s: %s", url, e.reason)
                    self.failed.add(url)
                    continue

                document = parse_document(await renderer.content())
                self.results.append(PageRecord(url, extract_sections(document)))
                self.frontier.extend(discover_links(document, self.scope, self.visited))
                self.visited.add(url)

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (пропущено %d)", len(self.results), duration, len(self.failed)
        )
        return self.results
