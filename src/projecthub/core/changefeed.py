"""ChangeFeed -- 内存中的表变更广播器

每个订阅者持有一个 asyncio.Queue，按表名和（可选）所属项目过滤。
订阅返回可取消的 Subscription 句柄，由持有方显式关闭。

投递语义为"尽力而为"：订阅者队列写满时该订阅被丢弃。
消费方应据此重新拉取完整状态，而不是依赖单条事件的内容。
"""

import asyncio
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

import structlog
from pydantic import BaseModel, Field

from .config import FEED_QUEUE_MAXSIZE

log = structlog.get_logger()

# 关闭订阅时放入队列，唤醒正在等待的消费者
_CLOSED = object()


class ChangeOp(StrEnum):
    """变更类型"""

    INSERT = "INSERT"
    UPDATE = "UPDATE"


class ChangeEvent(BaseModel):
    """一条表变更通知"""

    table: str = Field(description="表名，如 comments")
    op: ChangeOp = Field(default=ChangeOp.INSERT, description="变更类型")
    record: dict[str, Any] = Field(default_factory=dict, description="变更后的行")
    project_id: str | None = Field(default=None, description="该行所属项目")
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC), description="发布时间")


class Subscription:
    """订阅句柄 -- 异步迭代得到 ChangeEvent，close() 后迭代结束"""

    def __init__(
        self,
        feed: "ChangeFeed",
        table: str,
        project_id: str | None,
        queue_maxsize: int,
    ) -> None:
        self._feed = feed
        self.table = table
        self.project_id = project_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def matches(self, event: ChangeEvent) -> bool:
        """事件是否落在本订阅的作用域内"""
        if event.table != self.table:
            return False
        return self.project_id is None or event.project_id == self.project_id

    def close(self) -> None:
        """关闭订阅（幂等）并从 feed 注销"""
        if self._closed:
            return
        self._closed = True
        self._feed._discard(self)
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # 队列已满：让出一个位置给关闭标记
            self._queue.get_nowait()
            self._queue.put_nowait(_CLOSED)

    async def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """等待下一条事件

        Returns:
            ChangeEvent；订阅已关闭时返回 None

        Raises:
            TimeoutError: 超时仍无事件
        """
        if self._closed and self._queue.empty():
            return None
        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        if item is _CLOSED:
            return None
        return item

    def _offer(self, event: ChangeEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            return False
        return True

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


class ChangeFeed:
    """表变更广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = FEED_QUEUE_MAXSIZE) -> None:
        self._subscriptions: set[Subscription] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def subscribe(self, table: str, project_id: str | None = None) -> Subscription:
        """订阅指定表的变更

        Args:
            table: 表名
            project_id: 只接收属于该项目的变更，None 表示全部

        Returns:
            Subscription 句柄，使用完毕后必须 close()
        """
        subscription = Subscription(self, table, project_id, self._queue_maxsize)
        self._subscriptions.add(subscription)
        return subscription

    async def publish(self, event: ChangeEvent) -> int:
        """向匹配的订阅者广播事件

        Returns:
            成功投递的订阅者数量
        """
        delivered = 0
        dead: list[Subscription] = []
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            if subscription._offer(event):
                delivered += 1
            else:
                dead.append(subscription)

        # 清理已满的订阅
        for subscription in dead:
            log.warning(
                "change_feed_subscriber_dropped",
                table=subscription.table,
                project_id=subscription.project_id,
            )
            subscription.close()
        return delivered

    def close(self) -> None:
        """关闭全部订阅"""
        for subscription in list(self._subscriptions):
            subscription.close()

    def _discard(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)
