"""Shared pytest fixtures – Nightingale faked with ``httpx.MockTransport``."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest
import pytest_asyncio

from fakes import BASE_URL, TOKEN, RecordingSleep
from n9e_mcp.client import N9eClient, RequestContext, context_with_client


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest_asyncio.fixture
async def make_client(sleeps):
    """Factory building an N9eClient whose HTTP layer is a MockTransport."""
    http_clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], base_url: str = BASE_URL) -> N9eClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
        http_clients.append(http)
        return N9eClient(TOKEN, base_url, "n9e-mcp-server/test", http_client=http, sleep=sleeps)

    yield factory

    for http in http_clients:
        await http.aclose()


@pytest.fixture
def ctx_for() -> Callable[[N9eClient], RequestContext]:
    """Build a request context carrying the given client."""

    def build(client: N9eClient) -> RequestContext:
        return context_with_client(RequestContext(), client)

    return build


@pytest.fixture
def make_server(make_client):
    """Factory building a fully wired N9eMcpServer around a mocked Nightingale."""
    from n9e_mcp.config import Settings
    from n9e_mcp.mcp.server import create_mcp_server

    def factory(handler: Callable[[httpx.Request], httpx.Response], **overrides):
        values = {"token": TOKEN, "base_url": BASE_URL, "toolsets": "all", "read_only": False}
        values.update(overrides)
        return create_mcp_server(Settings(**values), client=make_client(handler))

    return factory
