# File: tests/test_server.py
"""WebSocket protocol tests: a real aiohttp server with a scripted renderer."""
from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import ClientSession, web
from site_stream.config import Settings
from site_stream.server.app import create_app

SEED = "https://a.example/"
PAGES = {
    SEED: '<h1>Root</h1><p>hello</p><a href="/next">next</a>',
    "https://a.example/next": "<li>item</li>",
}


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


async def wait_for(predicate, timeout: float = 5.0) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.02)
    return predicate()


@pytest.fixture()
def pool(make_pool):
    return make_pool(PAGES)


@pytest_asyncio.fixture
async def server(unused_tcp_port: int, pool) -> AsyncIterator[str]:
    settings = Settings(renderer="http", keepalive_interval=5.0, max_pages=10)
    async for url in _serve_app(create_app(settings, renderers=pool), unused_tcp_port):
        yield url


@pytest_asyncio.fixture
async def client() -> AsyncIterator[ClientSession]:
    async with ClientSession() as session:
        yield session


@pytest.mark.asyncio()
async def test_connected_then_visiting_then_scraped_data(server, client, pool):
    async with client.ws_connect(server) as ws:
        assert await ws.receive_json(timeout=5) == {"status": "connected"}
        await ws.send_str(json.dumps({"url": SEED}))

        assert await ws.receive_json(timeout=5) == {"visiting": SEED}
        assert await ws.receive_json(timeout=5) == {"visiting": "https://a.example/next"}
        assert await ws.receive_json(timeout=5) == {
            "scrapedData": [
                {"url": SEED, "data": [{"title": "Root", "content": [{"tag": "p", "text": "hello"}]}]},
                {"url": "https://a.example/next", "data": [{"title": "", "content": [{"tag": "li", "text": "item"}]}]},
            ]
        }

    assert len(pool.instances) == 1
    assert pool.instances[0].closed


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "payload,message",
    [
        ("not json", "Invalid JSON payload"),
        ("{}", "URL is required"),
        ('{"url": ""}', "URL is required"),
        ('{"url": 42}', "URL is required"),
        ('["https://a.example/"]', "URL is required"),
        ('{"url": "/relative"}', "Invalid URL: /relative"),
    ],
)
async def test_malformed_request_yields_one_error_and_no_session(server, client, pool, payload, message):
    async with client.ws_connect(server) as ws:
        await ws.receive_json(timeout=5)
        await ws.send_str(payload)
        assert await ws.receive_json(timeout=5) == {"error": message}

        # the channel stays usable and nothing else was queued
        await ws.send_str(json.dumps({"url": SEED}))
        assert await ws.receive_json(timeout=5) == {"visiting": SEED}

    assert len(pool.instances) == 1


@pytest.mark.asyncio()
async def test_unexpected_error_is_reported_and_renderer_released(unused_tcp_port, client, make_pool):
    pool = make_pool(PAGES, explode_on="https://a.example/next")
    app = create_app(Settings(renderer="http"), renderers=pool)

    async for base in _serve_app(app, unused_tcp_port):
        async with client.ws_connect(base) as ws:
            await ws.receive_json(timeout=5)
            await ws.send_json({"url": SEED})
            events = [await ws.receive_json(timeout=5) for _ in range(3)]

    assert events == [
        {"visiting": SEED},
        {"visiting": "https://a.example/next"},
        {"error": "An unexpected error occurred."},
    ]
    assert pool.instances[0].closed


@pytest.mark.asyncio()
async def test_sessions_on_one_channel_run_concurrently(unused_tcp_port, client, make_pool):
    pool = make_pool(PAGES, delay=0.3)
    app = create_app(Settings(renderer="http"), renderers=pool)

    async for base in _serve_app(app, unused_tcp_port):
        async with client.ws_connect(base) as ws:
            await ws.receive_json(timeout=5)
            loop = asyncio.get_running_loop()
            started = loop.time()
            await ws.send_json({"url": SEED})
            await ws.send_json({"url": "https://a.example/next"})
            results = []
            while len(results) < 2:
                event = await ws.receive_json(timeout=5)
                if "scrapedData" in event:
                    results.append(event["scrapedData"])
            elapsed = loop.time() - started

    # sequential execution would need three delayed navigations
    assert elapsed < 0.3 * 3
    assert sorted(len(r) for r in results) == [1, 2]
    assert len(pool.instances) == 2
    assert all(r.closed for r in pool.instances)


@pytest.mark.asyncio()
async def test_closing_channel_cancels_session(unused_tcp_port, client, make_pool):
    pool = make_pool(PAGES, delay=30)
    app = create_app(Settings(renderer="http"), renderers=pool)

    async for base in _serve_app(app, unused_tcp_port):
        async with client.ws_connect(base) as ws:
            await ws.receive_json(timeout=5)
            await ws.send_json({"url": SEED})
            assert await ws.receive_json(timeout=5) == {"visiting": SEED}

            async with client.get(f"{base}/health") as resp:
                assert await resp.json() == {"status": "ok", "connections": 1, "sessions": 1}

        assert await wait_for(lambda: pool.instances[0].closed)

        async with client.get(f"{base}/health") as resp:
            assert await resp.json() == {"status": "ok", "connections": 0, "sessions": 0}


@pytest.mark.asyncio()
async def test_ws_alias_route(server, client):
    async with client.ws_connect(f"{server}/ws") as ws:
        assert await ws.receive_json(timeout=5) == {"status": "connected"}


@pytest.mark.asyncio()
async def test_session_pool_limits_concurrent_renderers(unused_tcp_port, client, make_pool):
    pool = make_pool(PAGES, delay=0.3)
    app = create_app(Settings(renderer="http", max_sessions=1), renderers=pool)

    async for base in _serve_app(app, unused_tcp_port):
        async with client.ws_connect(base) as ws:
            await ws.receive_json(timeout=5)
            await ws.send_json({"url": SEED})
            await ws.send_json({"url": "https://a.example/next"})

            await asyncio.sleep(0.15)
            # the second session waits for a slot before it creates a renderer
            assert len(pool.instances) == 1

            results = []
            while len(results) < 2:
                event = await ws.receive_json(timeout=5)
                if "scrapedData" in event:
                    results.append(event["scrapedData"])

    assert len(pool.instances) == 2
    assert pool.instances[0].closed and pool.instances[1].closed
