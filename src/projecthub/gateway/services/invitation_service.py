"""InvitationService -- 项目邀请与成员查询

邀请前检查：
1. 该邮箱已是项目成员 -> ALREADY_MEMBER
2. 该邮箱已有 pending 邀请 -> INVITATION_PENDING
并发情况下第 2 条由 (project_id, email) 的 pending 部分唯一索引兜底。
"""

from datetime import timedelta

import aiosqlite
from projecthub.core.exceptions import (
    ConflictError,
    FormValidationError,
    NotFoundError,
    StoreError,
)
from projecthub.core.models import (
    INVITABLE_ROLES,
    ActivityAction,
    InvitationStatus,
    MemberRole,
    ProjectInvitation,
    ProjectMember,
)
from ulid import ULID

from .base import BaseService, log, now_utc, require_text

INVITATION_TTL = timedelta(days=7)


class InvitationService(BaseService):
    """邀请业务服务"""

    async def invite(
        self,
        project_id: str,
        email: str,
        role: MemberRole = MemberRole.MEMBER,
    ) -> ProjectInvitation:
        """邀请邮箱以 role 加入项目

        Raises:
            FormValidationError: 邮箱为空或角色不可邀请
            ConflictError: 已是成员 / 已有待处理邀请
        """
        session = self.require_session()
        email = require_text("email", email).lower()
        if role not in INVITABLE_ROLES:
            raise FormValidationError("role", f"role {role} cannot be invited")
        await self.require_project(project_id)

        members = await self._stores.member_store.list_members(project_id)
        member_emails = {m.profile.email.lower() for m in members if m.profile}
        if email in member_emails:
            raise ConflictError(
                "ALREADY_MEMBER", "This user is already a member of the project."
            )
        pending = await self._stores.invitation_store.get_pending_invitation(
            project_id, email
        )
        if pending is not None:
            raise ConflictError(
                "INVITATION_PENDING", "An invitation has already been sent to this email."
            )

        now = now_utc()
        invitation = ProjectInvitation(
            id=str(ULID()),
            project_id=project_id,
            email=email,
            role=role,
            status=InvitationStatus.PENDING,
            invited_by=session.user_id,
            invited_at=now,
            expires_at=now + INVITATION_TTL,
        )
        entry = self.new_activity(
            project_id, ActivityAction.MEMBER_INVITED, f"Invited {email} as {role.value}"
        )

        try:
            await self.commit(
                "create_invitation",
                entry,
                lambda: self._stores.invitation_store.create_invitation(invitation),
            )
        except StoreError as e:
            if isinstance(e.original_error, aiosqlite.IntegrityError):
                raise ConflictError(
                    "INVITATION_PENDING",
                    "An invitation has already been sent to this email.",
                ) from e
            raise

        log.info("member_invited", project_id=project_id, invitation_id=invitation.id)
        return invitation

    async def cancel(self, invitation_id: str) -> ProjectInvitation:
        """取消邀请：状态置为 declined"""
        self.require_session()
        invitation = await self._stores.invitation_store.get_invitation(invitation_id)
        if invitation is None:
            raise NotFoundError("invitation", invitation_id)
        if invitation.status != InvitationStatus.PENDING:
            raise ConflictError(
                "INVITATION_NOT_PENDING",
                f"Invitation is already {invitation.status.value}",
            )

        await self.commit(
            "cancel_invitation",
            None,
            lambda: self._stores.invitation_store.update_invitation_status(
                invitation_id, InvitationStatus.DECLINED.value
            ),
        )
        log.info("invitation_cancelled", invitation_id=invitation_id)
        return invitation.model_copy(update={"status": InvitationStatus.DECLINED})

    async def list_invitations(self, project_id: str) -> list[ProjectInvitation]:
        await self.require_project(project_id)
        return await self._stores.invitation_store.list_invitations(project_id)

    async def list_members(self, project_id: str) -> list[ProjectMember]:
        await self.require_project(project_id)
        return await self._stores.member_store.list_members(project_id)
