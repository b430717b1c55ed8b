"""评论路由

GET/POST /api/projects/{project_id}/comments: 项目评论（最新在前）。
GET/POST /api/tasks/{task_id}/comments: 任务评论（最早在前）。
"""

from fastapi import APIRouter, Depends
from projecthub.core.backend import Backend
from projecthub.core.models import Comment, Session
from pydantic import BaseModel, Field

from ..deps import get_backend, get_current_session
from ..services.comment_service import CommentService

router = APIRouter()


class CreateCommentRequest(BaseModel):
    """评论请求体"""

    content: str = Field(default="", description="评论内容（去掉首尾空白后不能为空）")


class CommentListResponse(BaseModel):
    comments: list[Comment]


@router.get("/api/projects/{project_id}/comments", response_model=CommentListResponse)
async def list_project_comments(
    project_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    comments = await CommentService(backend, session).list_project_comments(project_id)
    return CommentListResponse(comments=comments)


@router.post(
    "/api/projects/{project_id}/comments", response_model=Comment, status_code=201
)
async def add_project_comment(
    project_id: str,
    body: CreateCommentRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = CommentService(backend, session)
    return await service.add_project_comment(project_id, body.content)


@router.get("/api/tasks/{task_id}/comments", response_model=CommentListResponse)
async def list_task_comments(
    task_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    comments = await CommentService(backend, session).list_task_comments(task_id)
    return CommentListResponse(comments=comments)


@router.post("/api/tasks/{task_id}/comments", response_model=Comment, status_code=201)
async def add_task_comment(
    task_id: str,
    body: CreateCommentRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = CommentService(backend, session)
    return await service.add_task_comment(task_id, body.content)
