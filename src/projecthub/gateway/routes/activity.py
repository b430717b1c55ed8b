"""活动日志路由

GET /api/activity: 跨项目活动日志，最新在前；支持 project_id 和 search 筛选。
"""

from fastapi import APIRouter, Depends, Query
from projecthub.core.backend import Backend
from projecthub.core.models import ActivityLog, Session, activity_category
from pydantic import BaseModel

from ..deps import get_backend, get_current_session
from ..services.activity_service import ActivityService

router = APIRouter()


class ActivityLogItem(ActivityLog):
    """带分类的活动日志项"""

    category: str


class ActivityListResponse(BaseModel):
    logs: list[ActivityLogItem]


@router.get("/api/activity", response_model=ActivityListResponse)
async def list_activity(
    project_id: str | None = Query(default=None, description="按项目筛选"),
    search: str | None = Query(default=None, description="操作者名或描述关键字"),
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
):
    logs = await ActivityService(backend, session).list_logs(project_id, search)
    return ActivityListResponse(
        logs=[
            ActivityLogItem(**entry.model_dump(), category=activity_category(entry.action))
            for entry in logs
        ]
    )
