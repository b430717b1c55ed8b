"""显示标签

每个枚举成员都在 match 中显式处理，新增成员而漏写分支时类型检查会报错。
"""

from typing import assert_never

from .enums import ActivityAction, InvitationStatus, MemberRole, TaskPriority, WorkStatus


def status_label(status: WorkStatus) -> str:
    match status:
        case WorkStatus.TODO:
            return "To Do"
        case WorkStatus.IN_PROGRESS:
            return "In Progress"
        case WorkStatus.DONE:
            return "Done"
        case _:
            assert_never(status)


def priority_label(priority: TaskPriority) -> str:
    match priority:
        case TaskPriority.URGENT:
            return "Urgent"
        case TaskPriority.HIGH:
            return "High"
        case TaskPriority.MEDIUM:
            return "Medium"
        case TaskPriority.LOW:
            return "Low"
        case _:
            assert_never(priority)


def role_label(role: MemberRole) -> str:
    match role:
        case MemberRole.OWNER:
            return "Owner"
        case MemberRole.ADMIN:
            return "Admin"
        case MemberRole.MEMBER:
            return "Member"
        case _:
            assert_never(role)


def invitation_status_label(status: InvitationStatus) -> str:
    match status:
        case InvitationStatus.PENDING:
            return "Pending"
        case InvitationStatus.ACCEPTED:
            return "Accepted"
        case InvitationStatus.DECLINED:
            return "Declined"
        case InvitationStatus.EXPIRED:
            return "Expired"
        case _:
            assert_never(status)


def activity_category(action: str) -> str:
    """活动日志分类（前端据此选择图标和颜色）

    action 是自由字符串，未知标签归为 "other"。
    """
    try:
        known = ActivityAction(action)
    except ValueError:
        return "other"
    match known:
        case ActivityAction.PROJECT_CREATED | ActivityAction.TASK_CREATED:
            return "created"
        case ActivityAction.STATUS_UPDATED | ActivityAction.TASK_STATUS_UPDATED:
            return "status"
        case ActivityAction.COMMENT_ADDED | ActivityAction.PROJECT_COMMENT_ADDED:
            return "comment"
        case ActivityAction.MEMBER_INVITED:
            return "member"
        case _:
            assert_never(known)


def status_phrase(status: WorkStatus) -> str:
    """日志文案中的状态写法：in_progress -> "in progress" """
    return status.value.replace("_", " ")
