"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from projecthub.core.backend import open_backend
from projecthub.gateway.config import GatewayConfig


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app"""
    os.environ["PROJECTHUB_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["PROJECTHUB_FILES_DIR"] = str(tmp_path / "files")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from projecthub.gateway.main import create_app

    app = create_app()

    backend = await open_backend(
        str(tmp_path / "test.db"),
        tmp_path / "files",
        public_base_url="http://test",
    )
    app.state.backend = backend
    app.state.gateway_config = GatewayConfig(public_base_url="http://test")

    yield app

    await backend.aclose()
    os.environ.pop("PROJECTHUB_DB_PATH", None)
    os.environ.pop("PROJECTHUB_FILES_DIR", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
