"""Shared fixtures: a throwaway aiohttp backend for live dispatch tests."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
ServeFn = Callable[[Handler], AbstractAsyncContextManager[str]]


@asynccontextmanager
async def _serve(handler: Handler) -> AsyncIterator[str]:
    """Run handler on every path of a local server and yield its base URL."""
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)
    async with TestServer(app) as server:
        yield str(server.make_url("/"))


@pytest.fixture
def serve() -> ServeFn:
    """Factory for local test backends.

    Usage:
        async with serve(handler) as base_url:
            ...
    """
    return _serve
