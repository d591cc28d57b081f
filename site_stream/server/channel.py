# site_stream/server/channel.py
"""
Single-writer outbound channel over an aiohttp WebSocket.

Concurrent sessions enqueue events; one writer task sends them in order.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiohttp import WSCloseCode, web

from site_stream.server.protocol import Event

logger = logging.getLogger("SiteStream")


class ChannelClosedError(ConnectionError):
    """The WebSocket is closed or a previous write to it failed."""


class Channel:
    """Ordered, interleaving-safe sender for one WebSocket."""

    def __init__(self, ws: web.WebSocketResponse) -> None:
        self._ws = ws
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._writer: Optional[asyncio.Task[None]] = None
        self._failed = False

    @property
    def closed(self) -> bool:
        return self._failed or self._ws.closed

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    async def send(self, event: Event) -> None:
        """Queue *event* for sending. Raises ChannelClosedError on a dead channel."""
        if self.closed:
            raise ChannelClosedError("channel is closed")
        await self._queue.put(event)

    async def flush(self) -> None:
        """Wait until every queued event has been written or dropped."""
        await self._queue.join()

    async def close(self, code: int = WSCloseCode.OK, message: bytes = b"") -> None:
        """Stop the writer and close the socket; queued events are dropped."""
        self._failed = True
        if self._writer is not None:
            self._writer.cancel()
            await asyncio.gather(self._writer, return_exceptions=True)
            self._writer = None
        if not self._ws.closed:
            await self._ws.close(code=code, message=message)

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                if not self._failed:
                    await self._ws.send_json(event)
            except (ConnectionResetError, RuntimeError) as exc:
                self._failed = True
                logger.warning("WebSocket send failed: %s", exc)
            finally:
                self._queue.task_done()


__all__ = ["Channel", "ChannelClosedError"]
