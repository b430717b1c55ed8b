"""Profile / ProjectMember / ProjectInvitation Domain Models"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import InvitationStatus, MemberRole


class Profile(BaseModel):
    """用户资料（id 与身份提供方的用户 ID 一致）"""

    id: str = Field(description="用户 ID")
    email: str = Field(description="邮箱")
    full_name: str | None = Field(default=None, description="全名")
    avatar_url: str | None = Field(default=None, description="头像 URL")
    created_at: datetime | None = Field(default=None, description="创建时间")
    updated_at: datetime | None = Field(default=None, description="更新时间")


class ProjectMember(BaseModel):
    """项目成员，(project_id, user_id) 唯一"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str = Field(description="项目 ID")
    user_id: str = Field(description="用户 ID")
    role: MemberRole = Field(default=MemberRole.MEMBER, description="角色")
    joined_at: datetime = Field(description="加入时间")
    profile: Profile | None = Field(default=None, description="关联的用户资料")


class ProjectInvitation(BaseModel):
    """项目邀请，同一 (project_id, email) 最多一条 pending"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str = Field(description="项目 ID")
    email: str = Field(description="受邀邮箱")
    role: MemberRole = Field(default=MemberRole.MEMBER, description="受邀角色")
    status: InvitationStatus = Field(
        default=InvitationStatus.PENDING,
        description="邀请状态",
    )
    invited_by: str = Field(description="邀请人用户 ID")
    invited_at: datetime = Field(description="邀请时间")
    expires_at: datetime | None = Field(default=None, description="过期时间")
    accepted_at: datetime | None = Field(default=None, description="接受时间")
