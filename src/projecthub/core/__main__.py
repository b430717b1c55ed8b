"""CLI 入口模块 -- python -m projecthub.core <command>

支持的命令：
  init-db  创建数据库与上传目录并初始化表结构
"""

import asyncio
import sys

from .config import get_db_path, get_files_dir


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m projecthub.core <command>")
        print("命令:")
        print("  init-db  创建数据库与上传目录并初始化表结构")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db")
        sys.exit(1)


async def init_database() -> None:
    """执行表结构初始化（幂等）"""
    from .store import create_store_group
    from .store.sqlite_init import verify_wal_mode

    db_path = get_db_path()
    files_dir = get_files_dir()

    print(f"数据库路径: {db_path}")
    print(f"上传目录: {files_dir}")

    files_dir.mkdir(parents=True, exist_ok=True)
    store_group = await create_store_group(db_path)

    try:
        wal = await verify_wal_mode(store_group.conn)
        print(f"初始化完成，WAL 模式: {'on' if wal else 'off'}")
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
