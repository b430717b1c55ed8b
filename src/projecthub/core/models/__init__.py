"""ProjectHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .activity import ActivityLog
from .comment import Comment, CommentReadStatus
from .enums import (
    INVITABLE_ROLES,
    ActivityAction,
    InvitationStatus,
    MemberRole,
    TaskPriority,
    WorkStatus,
    priority_rank,
)
from .labels import (
    activity_category,
    invitation_status_label,
    priority_label,
    role_label,
    status_label,
    status_phrase,
)
from .member import Profile, ProjectInvitation, ProjectMember
from .project import Project
from .session import Session
from .task import Task, parse_deadline

__all__ = [
    # 枚举
    "WorkStatus",
    "TaskPriority",
    "MemberRole",
    "InvitationStatus",
    "ActivityAction",
    "INVITABLE_ROLES",
    "priority_rank",
    # 显示标签
    "status_label",
    "priority_label",
    "role_label",
    "invitation_status_label",
    "activity_category",
    "status_phrase",
    # 实体
    "Project",
    "Task",
    "parse_deadline",
    "Comment",
    "CommentReadStatus",
    "ActivityLog",
    "Profile",
    "ProjectMember",
    "ProjectInvitation",
    "Session",
]
