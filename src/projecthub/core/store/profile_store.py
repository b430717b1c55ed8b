"""ProfileStore / SessionStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.member import Profile

_PROFILE_COLUMNS = "id, email, full_name, avatar_url, created_at, updated_at"


def _opt_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SqliteProfileStore:
    """ProfileStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def upsert_profile(self, profile: Profile) -> None:
        """创建或更新用户资料，created_at 只在首次写入时生效"""
        await self._conn.execute(
            """
            INSERT INTO profiles (id, email, full_name, avatar_url, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                email = excluded.email,
                full_name = COALESCE(excluded.full_name, profiles.full_name),
                avatar_url = COALESCE(excluded.avatar_url, profiles.avatar_url),
                updated_at = excluded.updated_at
            """,
            (
                profile.id,
                profile.email,
                profile.full_name,
                profile.avatar_url,
                profile.created_at.isoformat() if profile.created_at else None,
                profile.updated_at.isoformat() if profile.updated_at else None,
            ),
        )

    async def get_profile(self, user_id: str) -> Profile | None:
        cursor = await self._conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return self.row_to_profile(row) if row else None

    async def get_profile_by_email(self, email: str) -> Profile | None:
        cursor = await self._conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE email = ?",
            (email,),
        )
        row = await cursor.fetchone()
        return self.row_to_profile(row) if row else None

    @staticmethod
    def row_to_profile(row) -> Profile:
        """将数据库行转换为 Profile 模型（列顺序同 _PROFILE_COLUMNS）"""
        return Profile(
            id=row[0],
            email=row[1],
            full_name=row[2],
            avatar_url=row[3],
            created_at=_opt_datetime(row[4]),
            updated_at=_opt_datetime(row[5]),
        )


class SqliteSessionStore:
    """SessionStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_session(
        self, token: str, user_id: str, created_at: datetime, expires_at: datetime
    ) -> None:
        await self._conn.execute(
            "INSERT INTO sessions (token, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
            (token, user_id, created_at.isoformat(), expires_at.isoformat()),
        )

    async def get_session_user(self, token: str, now: datetime) -> str | None:
        """令牌存在且未过期时返回用户 ID"""
        cursor = await self._conn.execute(
            "SELECT user_id, expires_at FROM sessions WHERE token = ?",
            (token,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        if datetime.fromisoformat(row[1]) <= now:
            return None
        return row[0]

    async def delete_session(self, token: str) -> None:
        await self._conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
