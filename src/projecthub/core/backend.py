"""Backend -- 数据平台客户端对象

把 Store 实例组、变更广播器、文件存储和身份提供方打包成一个显式构造、
显式释放的对象，由调用方注入到各组件，不存在进程级单例。
"""

from datetime import timedelta
from pathlib import Path

import structlog

from .changefeed import ChangeFeed
from .config import FEED_QUEUE_MAXSIZE
from .identity import LocalIdentityProvider
from .store import LocalFileStore, StoreGroup, create_store_group

log = structlog.get_logger()


class Backend:
    """数据平台句柄"""

    def __init__(
        self,
        stores: StoreGroup,
        feed: ChangeFeed,
        files: LocalFileStore,
        identity: LocalIdentityProvider,
    ) -> None:
        self.stores = stores
        self.feed = feed
        self.files = files
        self.identity = identity
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """关闭全部订阅并释放数据库连接（幂等）"""
        if self._closed:
            return
        self._closed = True
        self.feed.close()
        await self.stores.close()
        log.info("backend_closed")


async def open_backend(
    db_path: str,
    files_dir: str | Path,
    public_base_url: str = "http://localhost:8000",
    session_ttl_hours: int = 24 * 7,
    feed_queue_maxsize: int = FEED_QUEUE_MAXSIZE,
) -> Backend:
    """创建并初始化 Backend

    Args:
        db_path: SQLite 数据库文件路径
        files_dir: 上传文件存储目录
        public_base_url: 文件公开 URL 的前缀
        session_ttl_hours: 访问令牌有效期（小时）
        feed_queue_maxsize: 每个变更订阅者的队列上限

    Returns:
        Backend 实例，使用完毕后调用 aclose()
    """
    files_path = Path(files_dir)
    files_path.mkdir(parents=True, exist_ok=True)

    stores = await create_store_group(db_path)
    backend = Backend(
        stores=stores,
        feed=ChangeFeed(queue_maxsize=feed_queue_maxsize),
        files=LocalFileStore(files_path, public_base_url),
        identity=LocalIdentityProvider(stores, timedelta(hours=session_ttl_hours)),
    )
    log.info("backend_opened", db_path=db_path, files_dir=str(files_path))
    return backend
