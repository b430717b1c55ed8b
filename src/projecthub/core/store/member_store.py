"""MemberStore / InvitationStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.member import Profile, ProjectInvitation, ProjectMember

_INVITATION_COLUMNS = (
    "id, project_id, email, role, status, invited_by, invited_at, expires_at, accepted_at"
)


def _opt_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SqliteMemberStore:
    """MemberStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def add_member(self, member: ProjectMember) -> None:
        await self._conn.execute(
            """
            INSERT INTO project_members (id, project_id, user_id, role, joined_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                member.id,
                member.project_id,
                member.user_id,
                member.role.value,
                member.joined_at.isoformat(),
            ),
        )

    async def list_members(self, project_id: str) -> list[ProjectMember]:
        """项目成员（LEFT JOIN profiles），按 joined_at 倒序"""
        cursor = await self._conn.execute(
            """
            SELECT m.id, m.project_id, m.user_id, m.role, m.joined_at,
                   p.id, p.email, p.full_name
            FROM project_members m
            LEFT JOIN profiles p ON p.id = m.user_id
            WHERE m.project_id = ?
            ORDER BY m.joined_at DESC
            """,
            (project_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_member(row) for row in rows]

    @staticmethod
    def _row_to_member(row) -> ProjectMember:
        profile = None
        if row[5] is not None:
            profile = Profile(id=row[5], email=row[6], full_name=row[7])
        return ProjectMember(
            id=row[0],
            project_id=row[1],
            user_id=row[2],
            role=row[3],
            joined_at=datetime.fromisoformat(row[4]),
            profile=profile,
        )


class SqliteInvitationStore:
    """InvitationStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_invitation(self, invitation: ProjectInvitation) -> None:
        await self._conn.execute(
            f"""
            INSERT INTO project_invitations ({_INVITATION_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                invitation.id,
                invitation.project_id,
                invitation.email,
                invitation.role.value,
                invitation.status.value,
                invitation.invited_by,
                invitation.invited_at.isoformat(),
                invitation.expires_at.isoformat() if invitation.expires_at else None,
                invitation.accepted_at.isoformat() if invitation.accepted_at else None,
            ),
        )

    async def get_invitation(self, invitation_id: str) -> ProjectInvitation | None:
        cursor = await self._conn.execute(
            f"SELECT {_INVITATION_COLUMNS} FROM project_invitations WHERE id = ?",
            (invitation_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_invitation(row) if row else None

    async def get_pending_invitation(
        self, project_id: str, email: str
    ) -> ProjectInvitation | None:
        cursor = await self._conn.execute(
            f"""
            SELECT {_INVITATION_COLUMNS} FROM project_invitations
            WHERE project_id = ? AND email = ? AND status = 'pending'
            LIMIT 1
            """,
            (project_id, email),
        )
        row = await cursor.fetchone()
        return self._row_to_invitation(row) if row else None

    async def list_invitations(self, project_id: str) -> list[ProjectInvitation]:
        cursor = await self._conn.execute(
            f"""
            SELECT {_INVITATION_COLUMNS} FROM project_invitations
            WHERE project_id = ? ORDER BY invited_at DESC
            """,
            (project_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_invitation(row) for row in rows]

    async def update_invitation_status(self, invitation_id: str, status: str) -> None:
        await self._conn.execute(
            "UPDATE project_invitations SET status = ? WHERE id = ?",
            (status, invitation_id),
        )

    @staticmethod
    def _row_to_invitation(row) -> ProjectInvitation:
        return ProjectInvitation(
            id=row[0],
            project_id=row[1],
            email=row[2],
            role=row[3],
            status=row[4],
            invited_by=row[5],
            invited_at=datetime.fromisoformat(row[6]),
            expires_at=_opt_datetime(row[7]),
            accepted_at=_opt_datetime(row[8]),
        )
