"""全局 pytest 配置 -- 临时 SQLite 数据库 / Backend / 登录身份 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest_asyncio
from projecthub.core.backend import Backend, open_backend
from projecthub.core.models import Session


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def tmp_files_dir(tmp_path: Path) -> Path:
    """提供临时上传目录"""
    files_dir = tmp_path / "files"
    files_dir.mkdir(parents=True, exist_ok=True)
    return files_dir


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from projecthub.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def backend(tmp_db_path: Path, tmp_files_dir: Path) -> AsyncGenerator[Backend, None]:
    """提供已打开的 Backend，测试结束后关闭"""
    instance = await open_backend(
        str(tmp_db_path),
        tmp_files_dir,
        public_base_url="http://test",
    )
    yield instance
    await instance.aclose()


@pytest_asyncio.fixture
async def alice(backend: Backend) -> Session:
    """已登录用户 Alice"""
    _token, session = await backend.identity.sign_in("alice@example.com", "Alice")
    return session


@pytest_asyncio.fixture
async def bob(backend: Backend) -> Session:
    """已登录用户 Bob（没有全名）"""
    _token, session = await backend.identity.sign_in("bob@example.com")
    return session
