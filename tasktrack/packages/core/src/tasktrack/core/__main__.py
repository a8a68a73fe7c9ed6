"""CLI 入口模块 -- python -m tasktrack.core <command>

支持的命令：
  init-db  创建数据库表与索引
  stats    按类型/状态统计任务数量
"""

import asyncio
import sys

from .config import get_db_path

_COMMANDS = ("init-db", "stats")


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m tasktrack.core <command>")
        print("命令:")
        print("  init-db  创建数据库表与索引")
        print("  stats    按类型/状态统计任务数量")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "stats":
        asyncio.run(print_stats())
    else:
        print(f"未知命令: {command}")
        print(f"可用命令: {', '.join(_COMMANDS)}")
        sys.exit(1)


async def init_database() -> None:
    """初始化数据库（幂等）"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    await store_group.conn.close()
    print("初始化完成")


async def print_stats() -> None:
    """输出未删除任务/用户统计"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())

    try:
        rows = await store_group.task_store.count_by_type_and_status()
        user_count = await store_group.user_store.count_users()
    finally:
        await store_group.conn.close()

    print(f"用户数: {user_count}")
    if not rows:
        print("暂无任务")
        return
    for task_type, status, count in rows:
        print(f"{task_type:<8} {status:<12} {count}")


if __name__ == "__main__":
    main()
