"""CommentService -- 项目评论 / 任务评论

评论写入后向 comments 表发布 INSERT 通知，project_id 总是评论所属的项目
（任务评论取任务所在项目），未读计数订阅据此过滤。
"""

from projecthub.core.exceptions import NotFoundError
from projecthub.core.models import ActivityAction, Comment
from projecthub.core.notifications import COMMENTS_TABLE
from ulid import ULID

from .base import BaseService, log, now_utc, require_text


class CommentService(BaseService):
    """评论业务服务"""

    async def add_project_comment(self, project_id: str, content: str) -> Comment:
        session = self.require_session()
        content = require_text("content", content)
        await self.require_project(project_id)

        comment = Comment(
            id=str(ULID()),
            project_id=project_id,
            content=content,
            created_by=session.user_id,
            created_by_name=session.display_name,
            created_at=now_utc(),
        )
        entry = self.new_activity(
            project_id, ActivityAction.PROJECT_COMMENT_ADDED, "Added comment on project"
        )
        await self.commit(
            "add_project_comment",
            entry,
            lambda: self._stores.comment_store.create_comment(comment),
        )
        await self.publish(COMMENTS_TABLE, comment.model_dump(mode="json"), project_id)
        log.info("comment_added", comment_id=comment.id, project_id=project_id)
        return comment

    async def add_task_comment(self, task_id: str, content: str) -> Comment:
        session = self.require_session()
        content = require_text("content", content)
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id)

        comment = Comment(
            id=str(ULID()),
            task_id=task_id,
            content=content,
            created_by=session.user_id,
            created_by_name=session.display_name,
            created_at=now_utc(),
        )
        entry = self.new_activity(
            task.project_id, ActivityAction.COMMENT_ADDED, "Added comment on task"
        )
        await self.commit(
            "add_task_comment",
            entry,
            lambda: self._stores.comment_store.create_comment(comment),
        )
        await self.publish(COMMENTS_TABLE, comment.model_dump(mode="json"), task.project_id)
        log.info(
            "comment_added",
            comment_id=comment.id,
            task_id=task_id,
            project_id=task.project_id,
        )
        return comment

    async def list_project_comments(self, project_id: str) -> list[Comment]:
        """项目评论，最新在前"""
        await self.require_project(project_id)
        return await self._stores.comment_store.list_project_comments(project_id)

    async def list_task_comments(self, task_id: str) -> list[Comment]:
        """任务评论，最早在前"""
        if await self._stores.task_store.get_task(task_id) is None:
            raise NotFoundError("task", task_id)
        return await self._stores.comment_store.list_task_comments(task_id)
