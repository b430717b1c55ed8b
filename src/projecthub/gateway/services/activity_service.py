"""ActivityService -- 活动日志查询"""

from projecthub.core.models import ActivityLog

from .base import BaseService


class ActivityService(BaseService):
    """活动日志业务服务（只读）"""

    async def list_logs(
        self,
        project_id: str | None = None,
        search: str | None = None,
    ) -> list[ActivityLog]:
        """跨项目日志，最新在前

        Args:
            project_id: 只看某个项目
            search: 对操作者名或描述做大小写不敏感匹配
        """
        logs = await self._stores.activity_store.list_logs(project_id)
        if search:
            logs = [entry for entry in logs if entry.matches(search)]
        return logs
