"""健康检查测试

测试内容：
1. GET /health 返回 200 + ok
2. GET /ready 正常时返回 200 + checks 结构
3. GET /ready SQLite 不可用时返回 503
"""

from httpx import AsyncClient


class TestHealthCheck:
    async def test_health_returns_200(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_ready_returns_200(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        checks = data["checks"]
        assert checks["sqlite"] == "ok"
        assert checks["wal_mode"] == "ok"
        assert checks["files_dir"] == "ok"
        assert isinstance(checks["disk_space_mb"], int)

    async def test_ready_sqlite_failure(self, app, client: AsyncClient):
        # 关闭数据库连接模拟不可用
        await app.state.backend.stores.conn.close()

        resp = await client.get("/ready")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["sqlite"].startswith("error")
        assert data["checks"]["wal_mode"] == "skipped"
