"""NotificationReconciler -- 未读评论计数

对当前身份（可选限定到某个项目）维护 unread_count：
- refresh(): 每次都从存储全量重算，
  unread = {作用域内非本人所写的评论} - {本人已读回执}
- mark_as_read(): 幂等写入已读回执后，内存计数乐观减一（不低于 0）
- watch(): 订阅作用域内的新评论，每条通知触发一次 refresh()

不对并发的 refresh 加锁，最后完成的一次生效；refresh 对存储状态是纯函数，
乐观减一造成的偏差由下一次 refresh 纠正。
重算代价与作用域内评论总数成正比，没有分页，评论量较大时需要重新设计。
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import aiosqlite
import structlog

from .backend import Backend
from .changefeed import Subscription
from .exceptions import AuthenticationRequiredError, StoreError
from .models import Session
from .store import write_only

log = structlog.get_logger()

COMMENTS_TABLE = "comments"

OnChange = Callable[[int], Awaitable[None]]


class NotificationReconciler:
    """未读评论计数器

    生命周期与持有它的视图（如一次 SSE 连接）一致，结束时必须 close()。
    """

    def __init__(
        self,
        backend: Backend,
        session: Session | None,
        project_id: str | None = None,
    ) -> None:
        self._backend = backend
        self._session = session
        self.project_id = project_id
        self._unread_count = 0
        self._closed = False
        self._watchers: dict[Subscription, asyncio.Task] = {}

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def watching(self) -> bool:
        """是否还有未结束的 watch() 监听"""
        return bool(self._watchers)

    async def refresh(self) -> int:
        """从存储全量重算未读数

        查询失败时记录日志并保留上一次的值；close() 之后返回的结果被丢弃。

        Returns:
            当前 unread_count
        """
        if self._session is None:
            return self._unread_count
        user_id = self._session.user_id
        stores = self._backend.stores

        try:
            comments = await stores.comment_store.list_comments_in_scope(self.project_id)
            read_ids = await stores.read_status_store.list_read_comment_ids(user_id)
        except Exception as e:
            log.error(
                "unread_refresh_failed",
                user_id=user_id,
                project_id=self.project_id,
                error_type=type(e).__name__,
            )
            return self._unread_count

        if self._closed:
            return self._unread_count

        unread = [c for c in comments if c.is_unread_for(user_id, read_ids)]
        self._unread_count = len(unread)
        return self._unread_count

    async def mark_as_read(self, comment_id: str) -> None:
        """标记评论已读

        Raises:
            AuthenticationRequiredError: 没有登录身份
            StoreError: 写入回执失败，计数保持不变
        """
        if self._session is None:
            raise AuthenticationRequiredError()
        user_id = self._session.user_id
        stores = self._backend.stores
        now = datetime.now(UTC).isoformat()

        try:
            await write_only(
                stores,
                lambda: stores.read_status_store.upsert_read_status(user_id, comment_id, now),
            )
        except aiosqlite.Error as e:
            log.error(
                "mark_comment_read_failed",
                user_id=user_id,
                comment_id=comment_id,
                error_type=type(e).__name__,
            )
            raise StoreError("mark_comment_read", e) from e

        if not self._closed:
            self._unread_count = max(0, self._unread_count - 1)

    async def watch(self, on_change: OnChange | None = None) -> Subscription:
        """订阅作用域内的新评论

        每收到一条插入通知就 refresh() 一次，然后以新计数调用 on_change。

        Returns:
            Subscription 句柄；关闭它即停止监听
        """
        subscription = await self._backend.feed.subscribe(
            COMMENTS_TABLE, project_id=self.project_id
        )
        task = asyncio.create_task(self._pump(subscription, on_change))
        self._watchers[subscription] = task
        return subscription

    async def close(self) -> None:
        """关闭全部订阅并等待监听任务结束（幂等）"""
        if self._closed:
            return
        self._closed = True
        tasks = []
        for subscription, task in list(self._watchers.items()):
            subscription.close()
            if task is not asyncio.current_task():
                tasks.append(task)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._watchers.clear()

    async def __aenter__(self) -> "NotificationReconciler":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _pump(self, subscription: Subscription, on_change: OnChange | None) -> None:
        try:
            async for _event in subscription:
                count = await self.refresh()
                if self._closed:
                    break
                if on_change is None:
                    continue
                try:
                    await on_change(count)
                except Exception as e:
                    log.error(
                        "unread_change_callback_failed",
                        project_id=self.project_id,
                        error_type=type(e).__name__,
                    )
        finally:
            subscription.close()
            self._watchers.pop(subscription, None)
