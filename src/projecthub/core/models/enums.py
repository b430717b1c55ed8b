"""枚举定义

包含 WorkStatus（项目与任务共用）、TaskPriority、MemberRole、InvitationStatus、
ActivityAction 枚举，以及 priority_rank 排序权重。
"""

from enum import StrEnum
from typing import assert_never


class WorkStatus(StrEnum):
    """项目/任务状态"""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """任务优先级"""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MemberRole(StrEnum):
    """项目成员角色"""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


# 邀请时可选的角色（owner 只能由项目创建产生）
INVITABLE_ROLES: set[MemberRole] = {MemberRole.ADMIN, MemberRole.MEMBER}


class InvitationStatus(StrEnum):
    """邀请状态"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ActivityAction(StrEnum):
    """活动日志动作标签

    action 列本身是自由字符串，这里列出应用写入的全部标签。
    """

    PROJECT_CREATED = "project_created"
    STATUS_UPDATED = "status_updated"
    TASK_CREATED = "task_created"
    TASK_STATUS_UPDATED = "task_status_updated"
    COMMENT_ADDED = "comment_added"
    PROJECT_COMMENT_ADDED = "project_comment_added"
    MEMBER_INVITED = "member_invited"


def priority_rank(priority: TaskPriority | None) -> int:
    """优先级排序权重：urgent(0) < high(1) < medium(2) < low(3)

    未设置的优先级按 medium 处理。
    """
    if priority is None:
        priority = TaskPriority.MEDIUM
    match priority:
        case TaskPriority.URGENT:
            return 0
        case TaskPriority.HIGH:
            return 1
        case TaskPriority.MEDIUM:
            return 2
        case TaskPriority.LOW:
            return 3
        case _:
            assert_never(priority)
