"""TaskService -- 任务创建/状态更新/查询业务逻辑

任务创建流程：
1. 校验标题（为空时在任何写入和上传之前拒绝）
2. 有附件时先上传到 task-files/{project_id}/{毫秒时间戳}.{扩展名}
3. 单事务写入任务 + task_created 日志
4. 发布 tasks 变更通知
"""

from collections import Counter
from datetime import date

import structlog
from pydantic import BaseModel, Field
from projecthub.core.changefeed import ChangeOp
from projecthub.core.config import TASK_FILES_PREFIX
from projecthub.core.exceptions import FormValidationError, NotFoundError, StoreError
from projecthub.core.models import (
    ActivityAction,
    Task,
    TaskPriority,
    WorkStatus,
    priority_label,
    status_label,
    status_phrase,
)
from projecthub.core.ranking import days_until_deadline, is_due_soon, is_overdue, rank_tasks
from ulid import ULID

from .base import BaseService, now_utc, require_text

log = structlog.get_logger()

TASKS_TABLE = "tasks"


class TaskView(Task):
    """列表展示用的任务：附带截止日期标记和未读评论数"""

    overdue: bool = Field(default=False, description="是否已过期")
    due_soon: bool = Field(default=False, description="是否临近截止")
    days_left: int | None = Field(default=None, description="距截止日期天数")
    unread_comments: int = Field(default=0, description="当前用户的未读评论数")
    status_label: str = Field(default="", description="状态展示名")
    priority_label: str = Field(default="", description="优先级展示名")


def attachment_path(project_id: str, file_name: str, millis: int) -> str:
    """附件存储路径：task-files/{project_id}/{millis}.{ext}

    扩展名取文件名最后一个点之后的部分；没有点时整个文件名即扩展名。
    路径分隔符从扩展名中去掉。
    """
    ext = file_name.rsplit(".", 1)[-1].replace("/", "").replace("\\", "")
    return f"{TASK_FILES_PREFIX}/{project_id}/{millis}.{ext}"


class Attachment(BaseModel):
    """已上传的任务附件"""

    path: str = Field(description="存储路径")
    url: str = Field(description="公开 URL")
    file_name: str = Field(description="原始文件名")
    size: int = Field(description="字节数")
    sha256: str = Field(description="内容 SHA-256")


class TaskService(BaseService):
    """任务业务服务"""

    async def create_task(
        self,
        project_id: str,
        title: str,
        description: str = "",
        deadline: date | None = None,
        priority: TaskPriority | None = TaskPriority.MEDIUM,
        file_name: str | None = None,
        file_content: bytes | None = None,
        file_url: str | None = None,
    ) -> Task:
        """创建任务

        附件二选一：传入 file_content 时在此上传；或传入先前 upload_attachment
        得到的 file_url。

        Raises:
            AuthenticationRequiredError: 未登录
            FormValidationError: 标题为空
            NotFoundError: 项目不存在
            StoreError: 附件上传或数据库写入失败
        """
        session = self.require_session()
        title = require_text("title", title)
        await self.require_project(project_id)

        now = now_utc()
        if file_name and file_content is not None:
            attachment = await self.upload_attachment(project_id, file_name, file_content)
            file_url = attachment.url
        elif not file_url:
            file_url = None
            file_name = None

        task = Task(
            id=str(ULID()),
            project_id=project_id,
            title=title,
            description=description or "",
            deadline=deadline,
            priority=priority,
            status=WorkStatus.TODO,
            file_url=file_url,
            file_name=file_name,
            created_by=session.user_id,
            created_by_name=session.display_name,
            created_at=now,
            updated_at=now,
        )
        entry = self.new_activity(
            project_id, ActivityAction.TASK_CREATED, f"Created task: {title}"
        )

        await self.commit(
            "create_task",
            entry,
            lambda: self._stores.task_store.create_task(task),
        )
        await self.publish(TASKS_TABLE, task.model_dump(mode="json"), project_id)
        log.info("task_created", task_id=task.id, project_id=project_id)
        return task

    async def upload_attachment(
        self, project_id: str, file_name: str, content: bytes
    ) -> Attachment:
        """上传任务附件到 task-files/{project_id}/ 下

        Raises:
            FormValidationError: 文件名为空或解析出的存储路径无效
            StoreError: 写入失败
        """
        self.require_session()
        file_name = require_text("file_name", file_name)
        await self.require_project(project_id)

        millis = int(now_utc().timestamp() * 1000)
        path = attachment_path(project_id, file_name, millis)
        try:
            content_hash, size = await self._backend.files.upload(path, content)
        except ValueError as e:
            raise FormValidationError("file_name", "file_name resolves to an invalid path") from e
        except OSError as e:
            log.error(
                "task_file_upload_failed",
                project_id=project_id,
                path=path,
                error_type=type(e).__name__,
            )
            raise StoreError("upload_task_file", e) from e

        log.info("task_file_uploaded", path=path, size=size)
        return Attachment(
            path=path,
            url=self._backend.files.get_public_url(path),
            file_name=file_name,
            size=size,
            sha256=content_hash,
        )

    async def get_task(self, task_id: str) -> Task:
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    async def list_tasks(
        self, project_id: str, today: date | None = None
    ) -> list[TaskView]:
        """项目内任务，按截止日期 + 优先级排序"""
        await self.require_project(project_id)
        today = today or now_utc().date()
        tasks = rank_tasks(await self._stores.task_store.list_tasks(project_id))
        unread = await self._unread_by_task(project_id)
        return [
            TaskView(
                **task.model_dump(),
                overdue=is_overdue(task.deadline, today),
                due_soon=is_due_soon(task.deadline, today),
                days_left=days_until_deadline(task.deadline, today),
                unread_comments=unread.get(task.id, 0),
                status_label=status_label(task.status),
                priority_label=priority_label(task.priority or TaskPriority.MEDIUM),
            )
            for task in tasks
        ]

    async def update_status(self, task_id: str, status: WorkStatus) -> Task:
        """更新任务状态并记录 task_status_updated 日志"""
        self.require_session()
        task = await self.get_task(task_id)
        now = now_utc()
        entry = self.new_activity(
            task.project_id,
            ActivityAction.TASK_STATUS_UPDATED,
            f'Updated task "{task.title}" status to {status_phrase(status)}',
        )

        await self.commit(
            "update_task_status",
            entry,
            lambda: self._stores.task_store.update_task_status(
                task_id, status.value, now.isoformat()
            ),
        )
        updated = task.model_copy(update={"status": status, "updated_at": now})
        await self.publish(
            TASKS_TABLE, updated.model_dump(mode="json"), task.project_id, op=ChangeOp.UPDATE
        )
        return updated

    async def _unread_by_task(self, project_id: str) -> Counter:
        if self._session is None:
            return Counter()
        user_id = self._session.user_id
        comments = await self._stores.comment_store.list_comments_in_scope(project_id)
        read_ids = await self._stores.read_status_store.list_read_comment_ids(user_id)
        return Counter(
            c.task_id
            for c in comments
            if c.task_id is not None and c.is_unread_for(user_id, read_ids)
        )
