"""ProjectStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.project import Project
from ..models.task import parse_deadline

_COLUMNS = (
    "id, title, description, goals, deadline, status, "
    "created_by, owner_id, created_at, updated_at"
)


class SqliteProjectStore:
    """ProjectStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_project(self, project: Project) -> None:
        """创建项目记录"""
        await self._conn.execute(
            f"""
            INSERT INTO projects ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                project.id,
                project.title,
                project.description,
                project.goals,
                project.deadline.isoformat() if project.deadline else None,
                project.status.value,
                project.created_by,
                project.owner_id,
                project.created_at.isoformat(),
                project.updated_at.isoformat(),
            ),
        )

    async def get_project(self, project_id: str) -> Project | None:
        """根据 ID 查询项目"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE id = ?",
            (project_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_project(row)

    async def list_projects(self) -> list[Project]:
        """查询全部项目，按 created_at 倒序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects ORDER BY created_at DESC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_project(row) for row in rows]

    async def update_project_status(
        self, project_id: str, status: str, updated_at: str
    ) -> None:
        await self._conn.execute(
            "UPDATE projects SET status = ?, updated_at = ? WHERE id = ?",
            (status, updated_at, project_id),
        )

    async def count_projects_by_creator(self, user_id: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM projects WHERE created_by = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_project(row) -> Project:
        """将数据库行转换为 Project 模型"""
        return Project(
            id=row[0],
            title=row[1],
            description=row[2],
            goals=row[3],
            deadline=parse_deadline(row[4]),
            status=row[5],
            created_by=row[6],
            owner_id=row[7],
            created_at=datetime.fromisoformat(row[8]),
            updated_at=datetime.fromisoformat(row[9]),
        )
