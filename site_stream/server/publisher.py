# site_stream/server/publisher.py
"""
Stream publisher: turns inbound channel messages into crawl sessions and
session lifecycle into outbound events.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set, Union

from site_stream.config import Settings
from site_stream.crawler.renderer import RendererFactory
from site_stream.crawler.session import CrawlSession
from site_stream.server.channel import Channel, ChannelClosedError
from site_stream.server.protocol import (
    UNEXPECTED_ERROR,
    Event,
    MalformedRequestError,
    error_event,
    parse_request,
    scraped_data_event,
)

logger = logging.getLogger("SiteStream")


class StreamPublisher:
    """Owns the crawl sessions spawned by one channel."""

    def __init__(
        self,
        channel: Channel,
        settings: Settings,
        renderer_factory: RendererFactory,
        slots: asyncio.Semaphore,
    ) -> None:
        self.channel = channel
        self.settings = settings
        self.renderer_factory = renderer_factory
        self._slots = slots
        self._tasks: Set[asyncio.Task[None]] = set()

    @property
    def active_sessions(self) -> int:
        return len(self._tasks)

    async def handle_message(self, raw: Union[str, bytes]) -> Optional[asyncio.Task[None]]:
        """Start a session for a valid request, answer a malformed one with an error event."""
        try:
            request = parse_request(raw)
        except MalformedRequestError as exc:
            logger.warning("Rejected request: %s", exc)
            await self._send(error_event(str(exc)))
            return None

        logger.info("Scraping URL: %s", request.url)
        task = asyncio.create_task(self._run_session(request.url), name=f"crawl {request.url}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def shutdown(self) -> None:
        """Cancel every session of this channel and wait for their renderers to close."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Cancelled %d crawl session(s)", len(tasks))

    async def _run_session(self, url: str) -> None:
        async with self._slots:
            session = CrawlSession(url, self.settings, self.renderer_factory, emit=self.channel.send)
            try:
                records = await session.run()
            except ChannelClosedError:
                logger.info("Channel closed, crawl of %s aborted after %d page(s)", url, len(session.results))
                return
            except Exception:
                logger.exception("Unexpected error while crawling %s", url)
                await self._send(error_event(UNEXPECTED_ERROR))
                return
        await self._send(scraped_data_event(records))

    async def _send(self, event: Event) -> None:
        try:
            await self.channel.send(event)
        except ChannelClosedError:
            logger.info("Channel closed, dropped %s event", next(iter(event), "?"))


__all__ = ["StreamPublisher"]
