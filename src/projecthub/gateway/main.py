"""FastAPI 应用主文件

app 创建 + lifespan 管理：Backend 打开/关闭 + 路由注册 + 上传文件静态挂载。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from projecthub.core.backend import open_backend
from projecthub.core.config import get_db_path, get_files_dir

from .config import load_gateway_config
from .errors import register_exception_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import (
    activity,
    auth,
    comments,
    files,
    health,
    members,
    notifications,
    projects,
    tasks,
)

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时打开 Backend，关闭时释放订阅和数据库连接"""
    config = load_gateway_config()
    app.state.gateway_config = config

    backend = await open_backend(
        get_db_path(),
        get_files_dir(),
        public_base_url=config.public_base_url,
        session_ttl_hours=config.session_ttl_hours,
    )
    app.state.backend = backend
    log.info("gateway_started", public_base_url=config.public_base_url)

    yield

    await backend.aclose()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="ProjectHub Gateway",
        version="0.1.0",
        description="ProjectHub 项目协作 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    register_exception_handlers(app)

    # 注册路由
    app.include_router(auth.router, tags=["auth"])
    app.include_router(projects.router, tags=["projects"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(comments.router, tags=["comments"])
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(members.router, tags=["members"])
    app.include_router(activity.router, tags=["activity"])
    app.include_router(files.router, tags=["files"])
    app.include_router(health.router, tags=["health"])

    # 上传文件只读挂载（目录在 Backend 打开时创建）
    app.mount(
        "/files",
        StaticFiles(directory=str(get_files_dir()), check_dir=False),
        name="files",
    )

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
