"""CommentStore / ReadStatusStore SQLite 实现

评论只增不改；已读回执以 (user_id, comment_id) 为主键，重复写入是空操作。
"""

from datetime import datetime

import aiosqlite

from ..models.comment import Comment

_COLUMNS = "id, project_id, task_id, content, created_by, created_by_name, created_at"


class SqliteCommentStore:
    """CommentStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_comment(self, comment: Comment) -> None:
        await self._conn.execute(
            f"INSERT INTO comments ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                comment.id,
                comment.project_id,
                comment.task_id,
                comment.content,
                comment.created_by,
                comment.created_by_name,
                comment.created_at.isoformat(),
            ),
        )

    async def get_comment(self, comment_id: str) -> Comment | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM comments WHERE id = ?",
            (comment_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_comment(row) if row else None

    async def list_project_comments(self, project_id: str) -> list[Comment]:
        """直接挂在项目上的评论，按 created_at 倒序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM comments WHERE project_id = ? ORDER BY created_at DESC",
            (project_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_comment(row) for row in rows]

    async def list_task_comments(self, task_id: str) -> list[Comment]:
        """挂在任务上的评论，按 created_at 正序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM comments WHERE task_id = ? ORDER BY created_at ASC",
            (task_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_comment(row) for row in rows]

    async def list_comments_in_scope(self, project_id: str | None = None) -> list[Comment]:
        """作用域内的全部评论

        项目作用域包含挂在项目本身以及挂在该项目任务上的评论。
        """
        if project_id is None:
            cursor = await self._conn.execute(f"SELECT {_COLUMNS} FROM comments")
        else:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM comments
                WHERE project_id = ?
                   OR task_id IN (SELECT id FROM tasks WHERE project_id = ?)
                """,
                (project_id, project_id),
            )
        rows = await cursor.fetchall()
        return [self._row_to_comment(row) for row in rows]

    async def count_comments_by_creator(self, user_id: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM comments WHERE created_by = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_comment(row) -> Comment:
        """将数据库行转换为 Comment 模型"""
        return Comment(
            id=row[0],
            project_id=row[1],
            task_id=row[2],
            content=row[3],
            created_by=row[4],
            created_by_name=row[5],
            created_at=datetime.fromisoformat(row[6]),
        )


class SqliteReadStatusStore:
    """ReadStatusStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def upsert_read_status(self, user_id: str, comment_id: str, read_at: str) -> None:
        """插入已读回执，冲突时不做任何事（不会产生重复行）"""
        await self._conn.execute(
            """
            INSERT INTO comment_read_status (user_id, comment_id, read_at, created_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id, comment_id) DO NOTHING
            """,
            (user_id, comment_id, read_at, read_at),
        )

    async def list_read_comment_ids(self, user_id: str) -> set[str]:
        cursor = await self._conn.execute(
            "SELECT comment_id FROM comment_read_status WHERE user_id = ?",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return {row[0] for row in rows}

    async def count_read_receipts(self, user_id: str, comment_id: str) -> int:
        """(user, comment) 的回执行数，正常情况下为 0 或 1"""
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM comment_read_status WHERE user_id = ? AND comment_id = ?",
            (user_id, comment_id),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0
