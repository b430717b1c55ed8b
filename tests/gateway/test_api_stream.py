"""未读数 SSE 推送测试

测试内容：
1. 连接建立后先推送当前未读数
2. 作用域内有新评论时推送重算后的未读数
3. 订阅关闭后流正常结束
4. 未登录返回 401
"""

import asyncio
import json

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from projecthub.gateway.config import GatewayConfig
from projecthub.gateway.errors import register_exception_handlers
from projecthub.gateway.routes import auth, comments, notifications, projects
from sse_starlette.sse import AppStatus


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    # 每个测试一个事件循环，退出事件不能跨循环复用
    AppStatus.should_exit_event = None


@pytest_asyncio.fixture
async def stream_app(backend):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(comments.router)
    app.include_router(notifications.router)
    app.state.backend = backend
    app.state.gateway_config = GatewayConfig()
    return app


@pytest_asyncio.fixture
async def stream_client(stream_app) -> AsyncClient:
    async with AsyncClient(
        transport=ASGITransport(app=stream_app),
        base_url="http://test",
    ) as ac:
        yield ac


async def _headers(client: AsyncClient, email: str) -> dict[str, str]:
    resp = await client.post("/api/auth/sign-in", json={"email": email})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def _unread_events(body: str) -> list[dict]:
    events = []
    current_event = None
    for line in body.splitlines():
        if line.startswith("event:"):
            current_event = line.split(":", 1)[1].strip()
        elif line.startswith("data:") and current_event == notifications.UNREAD_EVENT:
            events.append(json.loads(line.split(":", 1)[1].strip()))
    return events


async def _wait_for_subscriber(backend, count: int = 1) -> None:
    for _ in range(200):
        if backend.feed.subscriber_count >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError("SSE 订阅未建立")


class TestUnreadStream:
    async def test_initial_then_update(self, stream_client, backend, monkeypatch):
        monkeypatch.setattr(notifications, "SSE_HEARTBEAT_INTERVAL", 0.05)
        alice = await _headers(stream_client, "alice@example.com")
        bob = await _headers(stream_client, "bob@example.com")

        project = (
            await stream_client.post("/api/projects", json={"title": "P"}, headers=alice)
        ).json()
        comments_url = f"/api/projects/{project['id']}/comments"
        await stream_client.post(comments_url, json={"content": "first"}, headers=alice)

        stream = asyncio.create_task(
            stream_client.get(
                "/api/stream/notifications",
                params={"project_id": project["id"]},
                headers=bob,
            )
        )
        await _wait_for_subscriber(backend)

        await stream_client.post(comments_url, json={"content": "second"}, headers=alice)
        # Bob 自己的评论触发重算，但不计入未读
        await stream_client.post(comments_url, json={"content": "mine"}, headers=bob)

        # 关闭全部订阅，流在处理完已收到的变更后结束
        backend.feed.close()
        resp = await asyncio.wait_for(stream, timeout=5)

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        counts = [event["unread_count"] for event in _unread_events(resp.text)]
        assert counts == [1, 2, 2]
        assert all(
            event["project_id"] == project["id"] for event in _unread_events(resp.text)
        )
        assert backend.feed.subscriber_count == 0

    async def test_other_project_does_not_push(self, stream_client, backend, monkeypatch):
        monkeypatch.setattr(notifications, "SSE_HEARTBEAT_INTERVAL", 0.05)
        alice = await _headers(stream_client, "alice@example.com")
        bob = await _headers(stream_client, "bob@example.com")

        watched = (
            await stream_client.post("/api/projects", json={"title": "A"}, headers=alice)
        ).json()
        other = (
            await stream_client.post("/api/projects", json={"title": "B"}, headers=alice)
        ).json()

        stream = asyncio.create_task(
            stream_client.get(
                "/api/stream/notifications",
                params={"project_id": watched["id"]},
                headers=bob,
            )
        )
        await _wait_for_subscriber(backend)

        await stream_client.post(
            f"/api/projects/{other['id']}/comments", json={"content": "x"}, headers=alice
        )
        backend.feed.close()
        resp = await asyncio.wait_for(stream, timeout=5)

        counts = [event["unread_count"] for event in _unread_events(resp.text)]
        assert counts == [0]

    async def test_requires_sign_in(self, stream_client):
        resp = await stream_client.get("/api/stream/notifications")
        assert resp.status_code == 401
