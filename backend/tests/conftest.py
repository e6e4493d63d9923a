"""Fixtures compartidas para las pruebas."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from assistant_service.assistants.store import AssistantStore
from assistant_service.main import create_app


@pytest.fixture(name="store")
def fixture_store() -> AssistantStore:
    """Store vacío por prueba."""
    return AssistantStore()


@pytest.fixture(name="app")
def fixture_app(store: AssistantStore) -> FastAPI:
    return create_app(store=store)


@pytest.fixture(name="async_client")
async def fixture_async_client(app: FastAPI) -> AsyncClient:
    """Retorna un cliente asíncrono contra la app utilizando ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
