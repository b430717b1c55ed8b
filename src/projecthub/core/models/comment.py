"""Comment / CommentReadStatus Domain Models

评论挂在项目或任务上（二者恰好其一），创建后不可修改。
已读回执是 (user, comment) 唯一的事实记录，只增不删。
"""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class Comment(BaseModel):
    """Comment 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str | None = Field(default=None, description="所属项目 ID")
    task_id: str | None = Field(default=None, description="所属任务 ID")
    content: str = Field(description="评论内容")
    created_by: str = Field(description="作者用户 ID")
    created_by_name: str = Field(description="作者显示名")
    created_at: datetime = Field(description="创建时间")

    @model_validator(mode="after")
    def _exactly_one_parent(self) -> "Comment":
        if (self.project_id is None) == (self.task_id is None):
            raise ValueError("comment must reference exactly one of project_id or task_id")
        return self

    def is_unread_for(self, user_id: str, read_comment_ids: set[str]) -> bool:
        """对 user_id 而言是否未读：非本人所写且没有已读回执"""
        return self.created_by != user_id and self.id not in read_comment_ids


class CommentReadStatus(BaseModel):
    """已读回执"""

    user_id: str = Field(description="读者用户 ID")
    comment_id: str = Field(description="评论 ID")
    read_at: datetime = Field(description="已读时间")
    created_at: datetime = Field(description="创建时间")
