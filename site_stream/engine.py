# File: site_stream/engine.py
"""site_stream.engine: локальный запуск одной сессии обхода без WebSocket (для CLI и тестов)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from site_stream.config import Settings
from site_stream.crawler.models import PageRecord
from site_stream.crawler.renderer import RendererFactory, renderer_factory
from site_stream.crawler.session import CrawlSession, EmitFn
from site_stream.logger import logger

__all__ = ["start_crawl"]


async def _log_event(event: Dict[str, Any]) -> None:
    logger.debug("event: %s", event)


async def start_crawl(
    settings: Settings,
    url: str,
    *,
    renderers: Optional[RendererFactory] = None,
    emit: Optional[EmitFn] = None,
) -> List[PageRecord]:
    """
    Запускает CrawlSession для *url* и возвращает список PageRecord.

    Parameters
    ----------
    settings : Settings
        Лимиты обхода и выбор рендерера.
    url : str
        Стартовый URL; его origin задаёт границы обхода.
    renderers : RendererFactory, optional
        Фабрика рендереров вместо настроенной в settings.
    emit : EmitFn, optional
        Получатель событий ``{"visiting": url}``.
    """
    session = CrawlSession(url, settings, renderers or renderer_factory(settings), emit=emit or _log_event)
    try:
        return await session.run()
    except Exception as exc:
        logger.error("Crawl failed: %s", exc)
        raise
