"""Session Model -- 已登录身份"""

from pydantic import BaseModel, Field

from ..config import UNKNOWN_USER_NAME


class Session(BaseModel):
    """已登录用户的身份信息

    由 IdentityProvider 签发，显式传入需要身份的组件。
    """

    user_id: str = Field(description="稳定的用户 ID")
    email: str = Field(description="邮箱")
    full_name: str | None = Field(default=None, description="全名（可选）")

    @property
    def display_name(self) -> str:
        """写入 created_by_name / user_name 的显示名"""
        return self.full_name or self.email or UNKNOWN_USER_NAME
