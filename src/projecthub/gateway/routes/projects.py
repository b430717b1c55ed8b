"""项目路由

GET /api/projects: 项目列表，支持 search / status 筛选。
POST /api/projects: 创建项目。
GET /api/projects/{project_id}: 项目详情（含排序后的任务、项目评论、活动日志）。
POST /api/projects/{project_id}/status: 更新项目状态。
GET /api/dashboard: 仪表盘统计。
GET /api/me/stats: 当前用户的创建数统计。
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from projecthub.core.backend import Backend
from projecthub.core.models import Project, Session, WorkStatus
from pydantic import BaseModel, Field

from ..deps import get_backend, get_current_session
from ..services.project_service import (
    DashboardStats,
    ProjectDetail,
    ProjectService,
    UserStats,
)

router = APIRouter()


class CreateProjectRequest(BaseModel):
    """创建项目请求体"""

    title: str = Field(default="", description="项目标题（必填）")
    description: str = Field(default="", description="项目描述")
    goals: str = Field(default="", description="项目目标")
    deadline: date | None = Field(default=None, description="截止日期")


class UpdateStatusRequest(BaseModel):
    """状态更新请求体"""

    status: WorkStatus


class ProjectListResponse(BaseModel):
    projects: list[Project]


@router.get("/api/projects", response_model=ProjectListResponse)
async def list_projects(
    search: str | None = Query(default=None, description="标题或描述关键字"),
    status: WorkStatus | None = Query(default=None, description="按状态筛选"),
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = ProjectService(backend, session)
    return ProjectListResponse(projects=await service.list_projects(search, status))


@router.post("/api/projects", response_model=Project, status_code=201)
async def create_project(
    body: CreateProjectRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = ProjectService(backend, session)
    return await service.create_project(
        title=body.title,
        description=body.description,
        goals=body.goals,
        deadline=body.deadline,
    )


@router.get("/api/projects/{project_id}", response_model=ProjectDetail)
async def get_project_detail(
    project_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = ProjectService(backend, session)
    return await service.get_project_detail(project_id)


@router.post("/api/projects/{project_id}/status", response_model=Project)
async def update_project_status(
    project_id: str,
    body: UpdateStatusRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = ProjectService(backend, session)
    return await service.update_status(project_id, body.status)


@router.get("/api/dashboard", response_model=DashboardStats)
async def dashboard(
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    return await ProjectService(backend, session).dashboard()


@router.get("/api/me/stats", response_model=UserStats)
async def user_stats(
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    return await ProjectService(backend, session).user_stats()
