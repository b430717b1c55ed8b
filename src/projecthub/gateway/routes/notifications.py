"""未读评论通知路由

GET /api/notifications/unread: 当前未读评论数（可选 project_id 限定项目）。
POST /api/comments/{comment_id}/read: 标记评论已读，返回标记后的未读数。
GET /api/stream/notifications: SSE 推送未读数。
    1. 先订阅评论变更，再推送当前未读数
    2. 每条作用域内的新评论触发一次重算并推送
    3. 空闲时按心跳间隔发送注释保活
    4. 连接结束或订阅被关闭时释放计数器
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, Depends, Query
from projecthub.core.backend import Backend
from projecthub.core.config import SSE_HEARTBEAT_INTERVAL
from projecthub.core.exceptions import NotFoundError
from projecthub.core.models import Session
from projecthub.core.notifications import NotificationReconciler
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from ..deps import get_backend, get_current_session

log = structlog.get_logger()

router = APIRouter()

UNREAD_EVENT = "unread_count"


class UnreadCountResponse(BaseModel):
    """未读数"""

    unread_count: int
    project_id: str | None = None


class MarkReadResponse(BaseModel):
    """标记已读结果"""

    comment_id: str
    unread_count: int


def _unread_sse_data(count: int, project_id: str | None) -> dict:
    return {
        "event": UNREAD_EVENT,
        "data": json.dumps(
            UnreadCountResponse(unread_count=count, project_id=project_id).model_dump(),
            ensure_ascii=False,
        ),
    }


@router.get("/api/notifications/unread", response_model=UnreadCountResponse)
async def unread_count(
    project_id: str | None = Query(default=None, description="限定到某个项目"),
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    async with NotificationReconciler(backend, session, project_id) as reconciler:
        count = await reconciler.refresh()
    return UnreadCountResponse(unread_count=count, project_id=project_id)


@router.post("/api/comments/{comment_id}/read", response_model=MarkReadResponse)
async def mark_comment_read(
    comment_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    """标记已读（重复标记是空操作）"""
    if await backend.stores.comment_store.get_comment(comment_id) is None:
        raise NotFoundError("comment", comment_id)

    async with NotificationReconciler(backend, session) as reconciler:
        await reconciler.mark_as_read(comment_id)
        count = await reconciler.refresh()
    return MarkReadResponse(comment_id=comment_id, unread_count=count)


@router.get("/api/stream/notifications")
async def stream_notifications(
    project_id: str | None = Query(default=None, description="限定到某个项目"),
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    """SSE 未读数推送端点"""
    reconciler = NotificationReconciler(backend, session, project_id)
    updates: asyncio.Queue[int] = asyncio.Queue()

    async def on_change(count: int) -> None:
        await updates.put(count)

    async def event_generator():
        try:
            await reconciler.watch(on_change)
            count = await reconciler.refresh()
            yield _unread_sse_data(count, project_id)

            while True:
                try:
                    count = await asyncio.wait_for(
                        updates.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                except TimeoutError:
                    if not reconciler.watching and updates.empty():
                        log.info("unread_stream_subscription_closed", user_id=session.user_id)
                        return
                    yield {"comment": "heartbeat"}
                    continue
                yield _unread_sse_data(count, project_id)
        finally:
            await reconciler.close()

    return EventSourceResponse(event_generator())
