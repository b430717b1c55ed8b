"""文件上传路由

POST /api/projects/{project_id}/files?filename=...: 请求体为文件原始字节，
    保存到 task-files/{project_id}/ 下并返回公开 URL。
上传的文件由 /files 静态挂载只读提供。
"""

from fastapi import APIRouter, Depends, Query, Request
from projecthub.core.backend import Backend
from projecthub.core.exceptions import FormValidationError
from projecthub.core.models import Session

from ..config import GatewayConfig
from ..deps import get_backend, get_current_session, get_gateway_config
from ..services.task_service import Attachment, TaskService

router = APIRouter()


@router.post(
    "/api/projects/{project_id}/files", response_model=Attachment, status_code=201
)
async def upload_file(
    project_id: str,
    request: Request,
    filename: str = Query(description="原始文件名，用于确定扩展名"),
    session: Session = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
    config: GatewayConfig = Depends(get_gateway_config),
):
    content = await request.body()
    if not content:
        raise FormValidationError("file", "file is empty")
    if len(content) > config.max_upload_bytes:
        raise FormValidationError(
            "file", f"file exceeds {config.max_upload_bytes} bytes"
        )

    service = TaskService(backend, session)
    return await service.upload_attachment(project_id, filename, content)
