from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from gateway.core.settings import Settings
from gateway.providers.client import ProviderClient
from tests.helpers import Handler, make_settings


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture()
async def provider_client_factory(settings: Settings) -> AsyncIterator[Callable[..., ProviderClient]]:
    http_clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, **overrides: Any) -> ProviderClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        http_clients.append(http_client)
        return ProviderClient(settings=make_settings(**overrides) if overrides else settings, http_client=http_client)

    yield factory
    for http_client in http_clients:
        await http_client.aclose()


@pytest.fixture()
def api_client_factory() -> Iterator[Callable[..., TestClient]]:
    from gateway.main import create_app

    http_clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, **overrides: Any) -> TestClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        http_clients.append(http_client)
        return TestClient(create_app(settings=make_settings(**overrides), http_client=http_client))

    yield factory
    # The app does not own an injected client, so it is closed here.
    for http_client in http_clients:
        asyncio.run(http_client.aclose())
