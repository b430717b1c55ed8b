"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、上传文件目录、SSE 心跳间隔、变更订阅队列长度等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PROJECTHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "PROJECTHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "projecthub.db"),
    )


def get_files_dir() -> Path:
    """获取上传文件存储目录"""
    return Path(
        os.environ.get(
            "PROJECTHUB_FILES_DIR",
            str(_get_base_dir() / "files"),
        )
    )


# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("PROJECTHUB_SSE_HEARTBEAT_INTERVAL", "15")
)

# 每个变更订阅者的队列上限（写满后订阅被丢弃）
FEED_QUEUE_MAXSIZE: int = int(
    os.environ.get("PROJECTHUB_FEED_QUEUE_MAXSIZE", "100")
)

# 任务附件在存储中的目录前缀
TASK_FILES_PREFIX: str = "task-files"

# 截止日期临近阈值（天）
DUE_SOON_DAYS: int = 3

# 缺少姓名和邮箱时使用的显示名
UNKNOWN_USER_NAME: str = "Unknown User"
