"""Project Domain Model"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from .enums import WorkStatus


class Project(BaseModel):
    """Project 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="项目标题")
    description: str = Field(default="", description="项目描述")
    goals: str = Field(default="", description="项目目标")
    deadline: date | None = Field(default=None, description="截止日期")
    status: WorkStatus = Field(default=WorkStatus.TODO, description="当前状态")
    created_by: str = Field(description="创建者用户 ID")
    owner_id: str = Field(description="所有者用户 ID")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
