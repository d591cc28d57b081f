# File: site_stream/server/__init__.py
"""site_stream.server: WebSocket-протокол, публикация событий и aiohttp-приложение."""

from __future__ import annotations

from site_stream.server.app import create_app, run_server

__all__ = ["create_app", "run_server"]
