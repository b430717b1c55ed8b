"""任务路由

GET /api/projects/{project_id}/tasks: 按截止日期 + 优先级排序的任务列表。
POST /api/projects/{project_id}/tasks: 创建任务。附件先经
    POST /api/projects/{project_id}/files 上传，
    再把返回的 url 和文件名填入 file_url / file_name。
GET /api/tasks/{task_id}: 任务详情。
POST /api/tasks/{task_id}/status: 更新任务状态。
"""

from datetime import date

from fastapi import APIRouter, Depends
from projecthub.core.backend import Backend
from projecthub.core.models import Session, Task, TaskPriority, WorkStatus
from pydantic import BaseModel, Field

from ..deps import get_backend, get_current_session
from ..services.task_service import TaskService, TaskView

router = APIRouter()


class CreateTaskRequest(BaseModel):
    """创建任务请求体"""

    title: str = Field(default="", description="任务标题（必填）")
    description: str = Field(default="", description="任务描述")
    deadline: date | None = Field(default=None, description="截止日期")
    priority: TaskPriority | None = Field(default=TaskPriority.MEDIUM, description="优先级")
    file_url: str | None = Field(default=None, description="已上传附件的公开 URL")
    file_name: str | None = Field(default=None, description="附件原始文件名")


class UpdateTaskStatusRequest(BaseModel):
    """任务状态更新请求体"""

    status: WorkStatus


class TaskListResponse(BaseModel):
    tasks: list[TaskView]


@router.get("/api/projects/{project_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    project_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = TaskService(backend, session)
    return TaskListResponse(tasks=await service.list_tasks(project_id))


@router.post("/api/projects/{project_id}/tasks", response_model=Task, status_code=201)
async def create_task(
    project_id: str,
    body: CreateTaskRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = TaskService(backend, session)
    return await service.create_task(
        project_id,
        title=body.title,
        description=body.description,
        deadline=body.deadline,
        priority=body.priority,
        file_name=body.file_name,
        file_url=body.file_url,
    )


@router.get("/api/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    return await TaskService(backend, session).get_task(task_id)


@router.post("/api/tasks/{task_id}/status", response_model=Task)
async def update_task_status(
    task_id: str,
    body: UpdateTaskStatusRequest,
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    service = TaskService(backend, session)
    return await service.update_status(task_id, body.status)
