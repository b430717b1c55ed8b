"""业务服务公共部分

所有写操作：先校验身份与输入，再在单事务内写数据 + 活动日志，
提交成功后向变更广播器发布通知。存储失败回滚、记录日志并抛出 StoreError。
"""

from datetime import UTC, datetime
from typing import Any

import aiosqlite
import structlog
from projecthub.core.backend import Backend
from projecthub.core.changefeed import ChangeEvent, ChangeOp
from projecthub.core.exceptions import (
    AuthenticationRequiredError,
    FormValidationError,
    NotFoundError,
    StoreError,
)
from projecthub.core.models import ActivityAction, ActivityLog, Project, Session
from projecthub.core.store import write_with_activity
from projecthub.core.store.transaction import Write
from ulid import ULID

log = structlog.get_logger()


class BaseService:
    """业务服务基类 -- 持有 Backend 和当前 Session"""

    def __init__(self, backend: Backend, session: Session | None = None) -> None:
        self._backend = backend
        self._stores = backend.stores
        self._session = session

    def require_session(self) -> Session:
        """需要身份的操作入口

        Raises:
            AuthenticationRequiredError: 当前没有登录身份
        """
        if self._session is None:
            raise AuthenticationRequiredError()
        return self._session

    async def require_project(self, project_id: str) -> Project:
        project = await self._stores.project_store.get_project(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

    def new_activity(
        self, project_id: str, action: ActivityAction, details: str
    ) -> ActivityLog:
        """以当前身份构造一条活动日志"""
        session = self.require_session()
        return ActivityLog(
            id=str(ULID()),
            project_id=project_id,
            user_id=session.user_id,
            user_name=session.display_name,
            action=action.value,
            details=details,
            created_at=datetime.now(UTC),
        )

    async def commit(
        self,
        operation: str,
        log_entry: ActivityLog | None,
        *writes: Write,
    ) -> None:
        """单事务提交写入 + 活动日志，失败时转换为 StoreError"""
        try:
            await write_with_activity(self._stores, log_entry, *writes)
        except aiosqlite.Error as e:
            log.error(
                "store_write_failed",
                operation=operation,
                error_type=type(e).__name__,
            )
            raise StoreError(operation, e) from e

        if log_entry is not None:
            await self.publish(
                "activity_logs", log_entry.model_dump(mode="json"), log_entry.project_id
            )

    async def publish(
        self,
        table: str,
        record: dict[str, Any],
        project_id: str | None,
        op: ChangeOp = ChangeOp.INSERT,
    ) -> None:
        await self._backend.feed.publish(
            ChangeEvent(table=table, op=op, record=record, project_id=project_id)
        )


def now_utc() -> datetime:
    return datetime.now(UTC)


def require_text(field: str, value: str | None) -> str:
    """必填文本字段：去掉首尾空白后不能为空

    Raises:
        FormValidationError: 字段为空
    """
    text = (value or "").strip()
    if not text:
        raise FormValidationError(field, f"{field} is required")
    return text
