"""ActivityLog Domain Model

活动日志只追加，不更新也不删除。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ActivityLog(BaseModel):
    """ActivityLog 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str = Field(description="所属项目 ID")
    user_id: str = Field(description="操作者用户 ID")
    user_name: str = Field(description="操作者显示名")
    action: str = Field(description="动作标签，如 task_created")
    details: str = Field(description="可读描述")
    created_at: datetime = Field(description="记录时间")

    def matches(self, search: str) -> bool:
        """按操作者名或描述做大小写不敏感的子串匹配"""
        needle = search.lower()
        return needle in self.user_name.lower() or needle in self.details.lower()
