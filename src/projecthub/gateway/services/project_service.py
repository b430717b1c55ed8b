"""ProjectService -- 项目创建/状态更新/查询/统计业务逻辑

项目创建流程：
1. 校验标题
2. 单事务写入项目 + 创建者 owner 成员 + project_created 日志
"""

from datetime import date

from pydantic import BaseModel, Field
from projecthub.core.models import (
    ActivityAction,
    ActivityLog,
    Comment,
    MemberRole,
    Project,
    ProjectMember,
    Task,
    WorkStatus,
    status_phrase,
)
from projecthub.core.ranking import rank_tasks
from ulid import ULID

from .base import BaseService, log, now_utc, require_text

# 仪表盘展示的最近项目数
RECENT_PROJECTS_LIMIT = 5


class ProjectDetail(BaseModel):
    """项目详情：项目本身 + 已排序任务 + 项目评论 + 活动日志"""

    project: Project
    tasks: list[Task]
    comments: list[Comment]
    logs: list[ActivityLog]


class DashboardStats(BaseModel):
    """仪表盘统计"""

    total_projects: int = 0
    projects_by_status: dict[str, int] = Field(default_factory=dict)
    total_tasks: int = 0
    tasks_by_status: dict[str, int] = Field(default_factory=dict)
    recent_projects: list[Project] = Field(default_factory=list)


class UserStats(BaseModel):
    """当前用户的创建数统计"""

    projects: int = 0
    tasks: int = 0
    comments: int = 0


def _count_by_status(items) -> dict[str, int]:
    counts = {status.value: 0 for status in WorkStatus}
    for item in items:
        counts[item.status.value] += 1
    return counts


class ProjectService(BaseService):
    """项目业务服务"""

    async def create_project(
        self,
        title: str,
        description: str = "",
        goals: str = "",
        deadline: date | None = None,
    ) -> Project:
        """创建项目，创建者即 owner"""
        session = self.require_session()
        title = require_text("title", title)

        now = now_utc()
        project = Project(
            id=str(ULID()),
            title=title,
            description=description or "",
            goals=goals or "",
            deadline=deadline,
            status=WorkStatus.TODO,
            created_by=session.user_id,
            owner_id=session.user_id,
            created_at=now,
            updated_at=now,
        )
        owner = ProjectMember(
            id=str(ULID()),
            project_id=project.id,
            user_id=session.user_id,
            role=MemberRole.OWNER,
            joined_at=now,
        )
        entry = self.new_activity(
            project.id, ActivityAction.PROJECT_CREATED, f"Created project: {title}"
        )

        await self.commit(
            "create_project",
            entry,
            lambda: self._stores.project_store.create_project(project),
            lambda: self._stores.member_store.add_member(owner),
        )
        log.info("project_created", project_id=project.id, user_id=session.user_id)
        return project

    async def list_projects(
        self,
        search: str | None = None,
        status: WorkStatus | None = None,
    ) -> list[Project]:
        """项目列表（最新在前），search 对标题或描述做大小写不敏感匹配"""
        projects = await self._stores.project_store.list_projects()
        if search:
            needle = search.lower()
            projects = [
                p
                for p in projects
                if needle in p.title.lower() or needle in p.description.lower()
            ]
        if status is not None:
            projects = [p for p in projects if p.status == status]
        return projects

    async def get_project(self, project_id: str) -> Project:
        return await self.require_project(project_id)

    async def get_project_detail(self, project_id: str) -> ProjectDetail:
        project = await self.require_project(project_id)
        tasks = await self._stores.task_store.list_tasks(project_id)
        comments = await self._stores.comment_store.list_project_comments(project_id)
        logs = await self._stores.activity_store.list_logs(project_id)
        return ProjectDetail(
            project=project,
            tasks=rank_tasks(tasks),
            comments=comments,
            logs=logs,
        )

    async def update_status(self, project_id: str, status: WorkStatus) -> Project:
        """更新项目状态并记录 status_updated 日志"""
        self.require_session()
        project = await self.require_project(project_id)
        now = now_utc()
        entry = self.new_activity(
            project_id,
            ActivityAction.STATUS_UPDATED,
            f"Updated project status to {status_phrase(status)}",
        )

        await self.commit(
            "update_project_status",
            entry,
            lambda: self._stores.project_store.update_project_status(
                project_id, status.value, now.isoformat()
            ),
        )
        return project.model_copy(update={"status": status, "updated_at": now})

    async def dashboard(self) -> DashboardStats:
        projects = await self._stores.project_store.list_projects()
        tasks = await self._stores.task_store.list_tasks()
        return DashboardStats(
            total_projects=len(projects),
            projects_by_status=_count_by_status(projects),
            total_tasks=len(tasks),
            tasks_by_status=_count_by_status(tasks),
            recent_projects=projects[:RECENT_PROJECTS_LIMIT],
        )

    async def user_stats(self) -> UserStats:
        session = self.require_session()
        user_id = session.user_id
        return UserStats(
            projects=await self._stores.project_store.count_projects_by_creator(user_id),
            tasks=await self._stores.task_store.count_tasks_by_creator(user_id),
            comments=await self._stores.comment_store.count_comments_by_creator(user_id),
        )
