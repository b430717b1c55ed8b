"""ProjectHub Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from pathlib import Path

import aiosqlite

from .activity_store import SqliteActivityLogStore
from .comment_store import SqliteCommentStore, SqliteReadStatusStore
from .file_store import LocalFileStore
from .member_store import SqliteInvitationStore, SqliteMemberStore
from .profile_store import SqliteProfileStore, SqliteSessionStore
from .project_store import SqliteProjectStore
from .protocols import (
    ActivityLogStore,
    CommentStore,
    FileStore,
    InvitationStore,
    MemberStore,
    ProfileStore,
    ProjectStore,
    ReadStatusStore,
    SessionStore,
    TaskStore,
)
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import write_only, write_with_activity


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        # 共享连接上的事务需要串行，见 transaction.py
        self.write_lock = asyncio.Lock()
        self.profile_store: ProfileStore = SqliteProfileStore(conn)
        self.session_store: SessionStore = SqliteSessionStore(conn)
        self.project_store: ProjectStore = SqliteProjectStore(conn)
        self.task_store: TaskStore = SqliteTaskStore(conn)
        self.comment_store: CommentStore = SqliteCommentStore(conn)
        self.read_status_store: ReadStatusStore = SqliteReadStatusStore(conn)
        self.activity_store: ActivityLogStore = SqliteActivityLogStore(conn)
        self.member_store: MemberStore = SqliteMemberStore(conn)
        self.invitation_store: InvitationStore = SqliteInvitationStore(conn)

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteProfileStore",
    "SqliteSessionStore",
    "SqliteProjectStore",
    "SqliteTaskStore",
    "SqliteCommentStore",
    "SqliteReadStatusStore",
    "SqliteActivityLogStore",
    "SqliteMemberStore",
    "SqliteInvitationStore",
    "LocalFileStore",
    "FileStore",
    "init_db",
    "write_with_activity",
    "write_only",
]
