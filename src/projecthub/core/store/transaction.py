"""写入 + 活动日志原子事务封装

业务写入与对应的 activity_logs 记录在同一 SQLite 事务内提交，
任何一步失败都整体回滚，不会留下只有数据没有日志（或相反）的半成品。

所有 Store 共享同一个连接，事务边界是连接级的：从第一条写入到
commit/rollback 期间必须持有 StoreGroup.write_lock，否则一个请求的
rollback 会连带撤销另一个请求尚未提交的写入。
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..models.activity import ActivityLog

if TYPE_CHECKING:
    from . import StoreGroup

Write = Callable[[], Awaitable[None]]


async def write_with_activity(
    stores: "StoreGroup",
    log_entry: ActivityLog | None,
    *writes: Write,
) -> None:
    """在同一事务内依次执行写入并追加活动日志

    Args:
        stores: Store 实例组（提供连接、写锁与 activity_store）
        log_entry: 要追加的活动日志，None 表示不记录
        writes: 无参异步写入函数，按顺序执行

    Raises:
        Exception: 任何写入失败，自动回滚后原样抛出
    """
    async with stores.write_lock:
        try:
            for write in writes:
                await write()
            if log_entry is not None:
                await stores.activity_store.append_log(log_entry)
            await stores.conn.commit()
        except Exception:
            await stores.conn.rollback()
            raise


async def write_only(stores: "StoreGroup", *writes: Write) -> None:
    """不带活动日志的单事务写入"""
    await write_with_activity(stores, None, *writes)
