"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、WAL 模式、文件目录、磁盘空间。
"""

import shutil

import structlog
from fastapi import APIRouter, Request
from projecthub.core.store.sqlite_init import verify_wal_mode
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. wal_mode: journal_mode 是否为 WAL
    3. files_dir: 上传目录可访问性
    4. disk_space_mb: 磁盘剩余空间
    """
    checks = {}
    all_ok = True
    backend = getattr(request.app.state, "backend", None)

    # 1. SQLite 连通性
    try:
        cursor = await backend.stores.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        checks["sqlite"] = f"error: {e}"
        all_ok = False

    # 2. WAL 模式
    if checks["sqlite"] == "ok":
        try:
            wal_ok = await verify_wal_mode(backend.stores.conn)
            checks["wal_mode"] = "ok" if wal_ok else "disabled"
        except Exception as e:
            checks["wal_mode"] = f"error: {e}"
            all_ok = False
    else:
        checks["wal_mode"] = "skipped"

    # 3. 上传目录
    try:
        files_dir = backend.files.files_dir
        if files_dir.exists() and files_dir.is_dir():
            checks["files_dir"] = "ok"
        else:
            checks["files_dir"] = "error: directory does not exist"
            all_ok = False
    except Exception as e:
        checks["files_dir"] = f"error: {e}"
        all_ok = False

    # 4. 磁盘空间
    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError as e:
        log.warning("disk_usage_check_failed", error=str(e))
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
