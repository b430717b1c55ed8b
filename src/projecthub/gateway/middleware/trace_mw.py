"""TraceMiddleware -- 项目级追踪

从 /api/projects/{project_id}/... 路径或 project_id 查询参数中提取项目 ID，
绑定到 structlog contextvars，使同一项目的操作日志可以串联检索。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_project_id(path: str, query_project_id: str | None = None) -> str | None:
    """路径 /api/projects/{id} 优先，其次 ?project_id="""
    parts = path.strip("/").split("/")
    for i, part in enumerate(parts):
        if part == "projects" and i + 1 < len(parts) and parts[i + 1]:
            return parts[i + 1]
    return query_project_id or None


class TraceMiddleware(BaseHTTPMiddleware):
    """项目级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        project_id = extract_project_id(
            request.url.path, request.query_params.get("project_id")
        )
        if project_id:
            structlog.contextvars.bind_contextvars(project_id=project_id)

        return await call_next(request)
