"""Task Domain Model

任务属于一个项目，可被任何协作者修改状态；没有删除路径。
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from .enums import TaskPriority, WorkStatus


def parse_deadline(value: object) -> date | None:
    """将截止日期统一为日历日期

    空值返回 None；非空但无法解析的字符串同样视为没有截止日期。
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


class Task(BaseModel):
    """Task 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str = Field(description="所属项目 ID")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    deadline: date | None = Field(default=None, description="截止日期")
    priority: TaskPriority | None = Field(
        default=TaskPriority.MEDIUM,
        description="优先级，未设置时按 medium 处理",
    )
    status: WorkStatus = Field(default=WorkStatus.TODO, description="当前状态")
    file_url: str | None = Field(default=None, description="附件公开 URL")
    file_name: str | None = Field(default=None, description="附件原始文件名")
    created_by: str = Field(description="创建者用户 ID")
    created_by_name: str = Field(description="创建者显示名")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("deadline", mode="before")
    @classmethod
    def _empty_deadline_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value
