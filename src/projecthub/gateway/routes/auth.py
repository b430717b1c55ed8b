"""身份路由

POST /api/auth/sign-in: 以邮箱登录（首次登录即注册），返回 Bearer 令牌。
POST /api/auth/sign-out: 注销当前令牌。
GET /api/auth/me: 当前登录身份。
"""

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from projecthub.core.backend import Backend
from projecthub.core.models import Session
from pydantic import BaseModel, EmailStr, Field
from starlette.responses import Response

from ..deps import bearer_scheme, get_backend, get_current_session

router = APIRouter()


class SignInRequest(BaseModel):
    """登录请求体"""

    email: EmailStr = Field(description="邮箱")
    full_name: str | None = Field(default=None, description="全名（可选）")


class SessionResponse(BaseModel):
    """当前身份"""

    user_id: str
    email: str
    full_name: str | None
    display_name: str


class SignInResponse(BaseModel):
    """登录响应"""

    access_token: str
    token_type: str = "bearer"
    user: SessionResponse


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        full_name=session.full_name,
        display_name=session.display_name,
    )


@router.post("/api/auth/sign-in", response_model=SignInResponse)
async def sign_in(
    body: SignInRequest,
    backend: Backend = Depends(get_backend),
):
    token, session = await backend.identity.sign_in(body.email, body.full_name)
    return SignInResponse(access_token=token, user=_session_response(session))


@router.post("/api/auth/sign-out", status_code=204)
async def sign_out(
    session: Session = Depends(get_current_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    backend: Backend = Depends(get_backend),
):
    if credentials is not None:
        await backend.identity.sign_out(credentials.credentials)
    return Response(status_code=204)


@router.get("/api/auth/me", response_model=SessionResponse)
async def me(session: Session = Depends(get_current_session)):
    return _session_response(session)
