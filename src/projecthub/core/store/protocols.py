"""Store Protocol 接口定义

定义各表存储的抽象接口，使用 Python Protocol 实现结构化子类型（duck typing）。
写方法不自动提交事务，由调用方管理（见 transaction.py）。
"""

from datetime import datetime
from typing import Protocol

from ..models import (
    ActivityLog,
    Comment,
    Profile,
    Project,
    ProjectInvitation,
    ProjectMember,
    Task,
)


class ProfileStore(Protocol):
    """用户资料存储接口"""

    async def upsert_profile(self, profile: Profile) -> None:
        """创建或更新用户资料（按 id）"""
        ...

    async def get_profile(self, user_id: str) -> Profile | None:
        """根据用户 ID 查询资料"""
        ...

    async def get_profile_by_email(self, email: str) -> Profile | None:
        """根据邮箱查询资料"""
        ...


class SessionStore(Protocol):
    """访问令牌存储接口"""

    async def create_session(
        self, token: str, user_id: str, created_at: datetime, expires_at: datetime
    ) -> None:
        """保存新令牌"""
        ...

    async def get_session_user(self, token: str, now: datetime) -> str | None:
        """返回未过期令牌对应的用户 ID"""
        ...

    async def delete_session(self, token: str) -> None:
        """注销令牌"""
        ...


class ProjectStore(Protocol):
    """项目存储接口"""

    async def create_project(self, project: Project) -> None:
        """创建项目记录"""
        ...

    async def get_project(self, project_id: str) -> Project | None:
        """根据 ID 查询项目"""
        ...

    async def list_projects(self) -> list[Project]:
        """查询全部项目，按 created_at 倒序"""
        ...

    async def update_project_status(
        self, project_id: str, status: str, updated_at: str
    ) -> None:
        """更新项目状态"""
        ...

    async def count_projects_by_creator(self, user_id: str) -> int:
        """统计用户创建的项目数"""
        ...


class TaskStore(Protocol):
    """任务存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 ID 查询任务"""
        ...

    async def list_tasks(self, project_id: str | None = None) -> list[Task]:
        """查询任务，可按项目筛选，按 created_at 倒序"""
        ...

    async def update_task_status(
        self, task_id: str, status: str, updated_at: str
    ) -> None:
        """更新任务状态"""
        ...

    async def count_tasks_by_creator(self, user_id: str) -> int:
        """统计用户创建的任务数"""
        ...


class CommentStore(Protocol):
    """评论存储接口（只增不改）"""

    async def create_comment(self, comment: Comment) -> None:
        """创建评论"""
        ...

    async def get_comment(self, comment_id: str) -> Comment | None:
        """根据 ID 查询评论"""
        ...

    async def list_project_comments(self, project_id: str) -> list[Comment]:
        """直接挂在项目上的评论，按 created_at 倒序"""
        ...

    async def list_task_comments(self, task_id: str) -> list[Comment]:
        """挂在任务上的评论，按 created_at 正序"""
        ...

    async def list_comments_in_scope(self, project_id: str | None = None) -> list[Comment]:
        """作用域内的全部评论

        project_id 为 None 时返回全部评论；否则返回挂在该项目及其任务上的评论。
        """
        ...

    async def count_comments_by_creator(self, user_id: str) -> int:
        """统计用户发表的评论数"""
        ...


class ReadStatusStore(Protocol):
    """已读回执存储接口"""

    async def upsert_read_status(self, user_id: str, comment_id: str, read_at: str) -> None:
        """插入已读回执，已存在时不做任何事"""
        ...

    async def list_read_comment_ids(self, user_id: str) -> set[str]:
        """用户已读的评论 ID 集合"""
        ...


class ActivityLogStore(Protocol):
    """活动日志存储接口（append-only）"""

    async def append_log(self, log: ActivityLog) -> None:
        """追加日志"""
        ...

    async def list_logs(self, project_id: str | None = None) -> list[ActivityLog]:
        """查询日志，可按项目筛选，按 created_at 倒序"""
        ...


class MemberStore(Protocol):
    """项目成员存储接口"""

    async def add_member(self, member: ProjectMember) -> None:
        """添加成员"""
        ...

    async def list_members(self, project_id: str) -> list[ProjectMember]:
        """项目成员（含资料），按 joined_at 倒序"""
        ...


class InvitationStore(Protocol):
    """项目邀请存储接口"""

    async def create_invitation(self, invitation: ProjectInvitation) -> None:
        """创建邀请"""
        ...

    async def get_invitation(self, invitation_id: str) -> ProjectInvitation | None:
        """根据 ID 查询邀请"""
        ...

    async def get_pending_invitation(
        self, project_id: str, email: str
    ) -> ProjectInvitation | None:
        """查询 (project_id, email) 的 pending 邀请"""
        ...

    async def list_invitations(self, project_id: str) -> list[ProjectInvitation]:
        """项目邀请，按 invited_at 倒序"""
        ...

    async def update_invitation_status(self, invitation_id: str, status: str) -> None:
        """更新邀请状态"""
        ...


class FileStore(Protocol):
    """文件存储接口"""

    async def upload(self, path: str, content: bytes) -> tuple[str, int]:
        """在 path 下保存文件，返回 (sha256_hex, size_bytes)"""
        ...

    def get_public_url(self, path: str) -> str:
        """path 对应的公开访问 URL"""
        ...

    async def download(self, path: str) -> bytes | None:
        """读取文件内容"""
        ...
