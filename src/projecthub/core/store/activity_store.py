"""ActivityLogStore SQLite 实现

activity_logs 表 append-only：只允许插入，不允许更新或删除。
"""

from datetime import datetime

import aiosqlite

from ..models.activity import ActivityLog

_COLUMNS = "id, project_id, user_id, user_name, action, details, created_at"


class SqliteActivityLogStore:
    """ActivityLogStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_log(self, log: ActivityLog) -> None:
        """追加日志

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            f"INSERT INTO activity_logs ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                log.id,
                log.project_id,
                log.user_id,
                log.user_name,
                log.action,
                log.details,
                log.created_at.isoformat(),
            ),
        )

    async def list_logs(self, project_id: str | None = None) -> list[ActivityLog]:
        """查询日志，可按项目筛选，按 created_at 倒序"""
        if project_id:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM activity_logs
                WHERE project_id = ? ORDER BY created_at DESC
                """,
                (project_id,),
            )
        else:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM activity_logs ORDER BY created_at DESC"
            )
        rows = await cursor.fetchall()
        return [self._row_to_log(row) for row in rows]

    @staticmethod
    def _row_to_log(row) -> ActivityLog:
        return ActivityLog(
            id=row[0],
            project_id=row[1],
            user_id=row[2],
            user_name=row[3],
            action=row[4],
            details=row[5],
            created_at=datetime.fromisoformat(row[6]),
        )
