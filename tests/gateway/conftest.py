"""gateway 测试配置 -- FastAPI app + httpx AsyncClient + 登录辅助"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

_ENV_KEYS = [
    "PROJECTHUB_DB_PATH",
    "PROJECTHUB_FILES_DIR",
    "PROJECTHUB_PUBLIC_BASE_URL",
    "LOGFIRE_SEND_TO_LOGFIRE",
]


@pytest_asyncio.fixture
async def gateway_tmp_dir(tmp_path: Path) -> Path:
    """Gateway 临时数据目录"""
    (tmp_path / "sqlite").mkdir(parents=True, exist_ok=True)
    (tmp_path / "files").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest_asyncio.fixture
async def app(gateway_tmp_dir: Path):
    """创建测试用 FastAPI app 实例"""
    os.environ["PROJECTHUB_DB_PATH"] = str(gateway_tmp_dir / "sqlite" / "test.db")
    os.environ["PROJECTHUB_FILES_DIR"] = str(gateway_tmp_dir / "files")
    os.environ["PROJECTHUB_PUBLIC_BASE_URL"] = "http://test"
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from projecthub.core.backend import open_backend
    from projecthub.gateway.config import load_gateway_config
    from projecthub.gateway.main import create_app

    application = create_app()

    # 手动初始化（ASGITransport 不触发 lifespan）
    config = load_gateway_config()
    backend = await open_backend(
        os.environ["PROJECTHUB_DB_PATH"],
        os.environ["PROJECTHUB_FILES_DIR"],
        public_base_url=config.public_base_url,
        session_ttl_hours=config.session_ttl_hours,
    )
    application.state.gateway_config = config
    application.state.backend = backend

    yield application

    await backend.aclose()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def sign_in(client: AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """返回登录函数：sign_in(email, full_name) -> Authorization 请求头"""

    async def _sign_in(email: str, full_name: str | None = None) -> dict[str, str]:
        resp = await client.post(
            "/api/auth/sign-in", json={"email": email, "full_name": full_name}
        )
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _sign_in


@pytest_asyncio.fixture
async def alice_headers(sign_in) -> dict[str, str]:
    return await sign_in("alice@example.com", "Alice")


@pytest_asyncio.fixture
async def bob_headers(sign_in) -> dict[str, str]:
    return await sign_in("bob@example.com")


@pytest_asyncio.fixture
async def project_id(client: AsyncClient, alice_headers) -> str:
    """Alice 创建的项目"""
    resp = await client.post(
        "/api/projects",
        json={"title": "网站改版", "description": "Q3 redesign"},
        headers=alice_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]
