# site_stream/server/app.py
"""
aiohttp application: crawl WebSocket at ``/`` (and ``/ws``) plus ``GET /health``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from aiohttp import WSCloseCode, WSMsgType, web

from site_stream.config import Settings
from site_stream.crawler.renderer import RendererFactory, renderer_factory
from site_stream.server.channel import Channel, ChannelClosedError
from site_stream.server.protocol import connected_event
from site_stream.server.publisher import StreamPublisher

logger = logging.getLogger("SiteStream")

SETTINGS_KEY = web.AppKey("settings", Settings)
RENDERER_KEY = web.AppKey("renderer_factory", object)
SLOTS_KEY = web.AppKey("session_slots", asyncio.Semaphore)
PUBLISHERS_KEY = web.AppKey("publishers", set)


async def websocket_handler(request: web.Request) -> web.WebSocketResponse:
    app = request.app
    settings = app[SETTINGS_KEY]
    ws = web.WebSocketResponse(heartbeat=settings.keepalive_interval)
    await ws.prepare(request)

    channel = Channel(ws)
    channel.start()
    publisher = StreamPublisher(channel, settings, app[RENDERER_KEY], app[SLOTS_KEY])
    publishers: Set[StreamPublisher] = app[PUBLISHERS_KEY]
    publishers.add(publisher)
    logger.info("Websocket connected (%d active)", len(publishers))

    try:
        await channel.send(connected_event())
        async for msg in ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                await publisher.handle_message(msg.data)
            elif msg.type == WSMsgType.ERROR:
                logger.warning("Websocket error: %s", ws.exception())
    except ChannelClosedError:
        logger.debug("Channel closed while reading")
    finally:
        publishers.discard(publisher)
        # sessions die with the channel that started them
        await publisher.shutdown()
        await channel.close()
        logger.info("Websocket disconnected (%d active)", len(publishers))
    return ws


async def health_handler(request: web.Request) -> web.Response:
    publishers: Set[StreamPublisher] = request.app[PUBLISHERS_KEY]
    return web.json_response(
        {
            "status": "ok",
            "connections": len(publishers),
            "sessions": sum(p.active_sessions for p in publishers),
        }
    )


async def _on_shutdown(app: web.Application) -> None:
    for publisher in list(app[PUBLISHERS_KEY]):
        await publisher.shutdown()
        await publisher.channel.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")


def create_app(settings: Settings, renderers: Optional[RendererFactory] = None) -> web.Application:
    """Build the application; *renderers* overrides the configured renderer factory."""
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[RENDERER_KEY] = renderers or renderer_factory(settings)
    app[SLOTS_KEY] = asyncio.Semaphore(settings.max_sessions)
    app[PUBLISHERS_KEY] = set()
    app.router.add_get("/", websocket_handler)
    app.router.add_get("/ws", websocket_handler)
    app.router.add_get("/health", health_handler)
    app.on_shutdown.append(_on_shutdown)
    return app


def run_server(settings: Settings) -> None:
    logger.info("Server is running on http://%s:%d", settings.host, settings.port)
    web.run_app(create_app(settings), host=settings.host, port=settings.port, print=None)


__all__ = ["create_app", "run_server", "websocket_handler", "health_handler"]
