"""TaskStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.task import Task, parse_deadline

_COLUMNS = (
    "id, project_id, title, description, deadline, priority, status, "
    "file_url, file_name, created_by, created_by_name, created_at, updated_at"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.project_id,
                task.title,
                task.description,
                task.deadline.isoformat() if task.deadline else None,
                task.priority.value if task.priority else None,
                task.status.value,
                task.file_url,
                task.file_name,
                task.created_by,
                task.created_by_name,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 ID 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self, project_id: str | None = None) -> list[Task]:
        """查询任务列表，支持按项目筛选，按 created_at 倒序"""
        if project_id:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE project_id = ? ORDER BY created_at DESC",
                (project_id,),
            )
        else:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC"
            )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task_status(
        self, task_id: str, status: str, updated_at: str
    ) -> None:
        await self._conn.execute(
            "UPDATE tasks SET status = ?, updated_at = ? WHERE id = ?",
            (status, updated_at, task_id),
        )

    async def count_tasks_by_creator(self, user_id: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM tasks WHERE created_by = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_task(row) -> Task:
        """将数据库行转换为 Task 模型

        历史数据中无法解析的 deadline 读作 None。
        """
        return Task(
            id=row[0],
            project_id=row[1],
            title=row[2],
            description=row[3] or "",
            deadline=parse_deadline(row[4]),
            priority=row[5],
            status=row[6],
            file_url=row[7],
            file_name=row[8],
            created_by=row[9],
            created_by_name=row[10],
            created_at=datetime.fromisoformat(row[11]),
            updated_at=datetime.fromisoformat(row[12]),
        )
