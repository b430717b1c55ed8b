"""成员与邀请路由

GET /api/projects/{project_id}/members: 项目成员（含用户资料）。
GET /api/projects/{project_id}/invitations: 邀请列表。
POST /api/projects/{project_id}/invitations: 发出邀请。
    - 409 ALREADY_MEMBER: 该邮箱已是成员
    - 409 INVITATION_PENDING: 该邮箱已有待处理邀请
POST /api/invitations/{invitation_id}/cancel: 取消邀请（状态置为 declined）。
"""

from fastapi import APIRouter, Depends
from projecthub.core.backend import Backend
from projecthub.core.models import (
    MemberRole,
    ProjectInvitation,
    ProjectMember,
    Session,
    invitation_status_label,
    role_label,
)
from pydantic import BaseModel, EmailStr, Field

from ..deps import get_backend, get_current_session
from ..services.invitation_service import InvitationService

router = APIRouter()


class InviteRequest(BaseModel):
    """邀请请求体"""

    email: EmailStr = Field(description="受邀邮箱")
    role: MemberRole = Field(default=MemberRole.MEMBER, description="member 或 admin")


class MemberItem(ProjectMember):
    """带角色展示名的成员项"""

    role_label: str


class InvitationItem(ProjectInvitation):
    """带角色与状态展示名的邀请项"""

    role_label: str
    status_label: str


class MemberListResponse(BaseModel):
    members: list[MemberItem]


class InvitationListResponse(BaseModel):
    invitations: list[InvitationItem]


@router.get("/api/projects/{project_id}/members", response_model=MemberListResponse)
async def list_members(
    project_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    members = await InvitationService(backend, session).list_members(project_id)
    return MemberListResponse(
        members=[
            MemberItem(**member.model_dump(), role_label=role_label(member.role))
            for member in members
        ]
    )


@router.get(
    "/api/projects/{project_id}/invitations", response_model=InvitationListResponse
)
async def list_invitations(
    project_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    invitations = await InvitationService(backend, session).list_invitations(project_id)
    return InvitationListResponse(
        invitations=[
            InvitationItem(
                **invitation.model_dump(),
                role_label=role_label(invitation.role),
                status_label=invitation_status_label(invitation.status),
            )
            for invitation in invitations
        ]
    )


@router.post(
    "/api/projects/{project_id}/invitations",
    response_model=ProjectInvitation,
    status_code=201,
)
async def invite(
    project_id: str,
    body: InviteRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = InvitationService(backend, session)
    return await service.invite(project_id, body.email, body.role)


@router.post("/api/invitations/{invitation_id}/cancel", response_model=ProjectInvitation)
async def cancel_invitation(
    invitation_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    return await InvitationService(backend, session).cancel(invitation_id)
