"""依赖注入模块 -- 通过 FastAPI Depends 注入 Backend 与当前身份

Backend 通过 app.state 管理，在 lifespan 中创建/关闭。
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from projecthub.core.backend import Backend
from projecthub.core.exceptions import AuthenticationRequiredError
from projecthub.core.models import Session

from .config import GatewayConfig

bearer_scheme = HTTPBearer(auto_error=False)


def get_backend(request: Request) -> Backend:
    """从 app.state 获取 Backend 实例"""
    return request.app.state.backend


def get_gateway_config(request: Request) -> GatewayConfig:
    """从 app.state 获取 GatewayConfig 实例"""
    return request.app.state.gateway_config


async def get_optional_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    backend: Backend = Depends(get_backend),
) -> Session | None:
    """解析 Bearer 令牌，缺失或无效时返回 None"""
    if credentials is None:
        return None
    return await backend.identity.resolve(credentials.credentials)


async def get_current_session(
    session: Session | None = Depends(get_optional_session),
) -> Session:
    """需要登录的接口使用，缺失或无效令牌返回 401"""
    if session is None:
        raise AuthenticationRequiredError()
    return session
