"""身份提供方

IdentityProvider 定义登录/解析/注销接口；LocalIdentityProvider 基于
profiles + sessions 两张表签发不透明访问令牌。
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Protocol

import structlog
from ulid import ULID

from .models import Profile, Session
from .store import StoreGroup, write_only

log = structlog.get_logger()


class IdentityProvider(Protocol):
    """身份提供方接口"""

    async def sign_in(self, email: str, full_name: str | None = None) -> tuple[str, Session]:
        """登录，返回 (访问令牌, Session)"""
        ...

    async def resolve(self, token: str) -> Session | None:
        """解析访问令牌，无效或过期时返回 None"""
        ...

    async def sign_out(self, token: str) -> None:
        """注销访问令牌"""
        ...


class LocalIdentityProvider:
    """IdentityProvider 的本地实现

    同一邮箱始终映射到同一个用户 ID；登录时创建或更新用户资料。
    """

    def __init__(self, stores: StoreGroup, session_ttl: timedelta) -> None:
        self._stores = stores
        self._session_ttl = session_ttl

    async def sign_in(self, email: str, full_name: str | None = None) -> tuple[str, Session]:
        now = datetime.now(UTC)
        email = email.strip().lower()
        existing = await self._stores.profile_store.get_profile_by_email(email)
        user_id = existing.id if existing else str(ULID())
        profile = Profile(
            id=user_id,
            email=email,
            full_name=full_name or None,
            created_at=now,
            updated_at=now,
        )
        token = secrets.token_urlsafe(32)

        await write_only(
            self._stores,
            lambda: self._stores.profile_store.upsert_profile(profile),
            lambda: self._stores.session_store.create_session(
                token, user_id, now, now + self._session_ttl
            ),
        )

        stored = await self._stores.profile_store.get_profile(user_id)
        session = Session(
            user_id=user_id,
            email=email,
            full_name=stored.full_name if stored else full_name,
        )
        log.info("user_signed_in", user_id=user_id, new_user=existing is None)
        return token, session

    async def resolve(self, token: str) -> Session | None:
        user_id = await self._stores.session_store.get_session_user(
            token, datetime.now(UTC)
        )
        if user_id is None:
            return None
        profile = await self._stores.profile_store.get_profile(user_id)
        if profile is None:
            return None
        return Session(user_id=profile.id, email=profile.email, full_name=profile.full_name)

    async def sign_out(self, token: str) -> None:
        await write_only(
            self._stores,
            lambda: self._stores.session_store.delete_session(token),
        )
