"""UserStore SQLite 实现

读取路径排除软删除用户；username_taken 例外，它需要覆盖软删除行
（已删除用户的用户名不可复用）。
写方法不自动提交事务。
"""

from datetime import datetime

import aiosqlite

from ..models.page import PageRequest
from ..models.user import User
from .task_store import to_db_timestamp

_USER_COLUMNS = "user_id, username, full_name, created_at, deleted, deleted_at"


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        await self._conn.execute(
            f"""
            INSERT INTO users ({_USER_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user.user_id,
                user.username,
                user.full_name,
                to_db_timestamp(user.created_at),
                int(user.deleted),
                to_db_timestamp(user.deleted_at) if user.deleted_at else None,
            ),
        )

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户（软删除用户返回 None）"""
        cursor = await self._conn.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = ? AND deleted = 0",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def exists(self, user_id: str) -> bool:
        """用户是否存在且未删除"""
        cursor = await self._conn.execute(
            "SELECT 1 FROM users WHERE user_id = ? AND deleted = 0 LIMIT 1",
            (user_id,),
        )
        return await cursor.fetchone() is not None

    async def username_taken(self, username: str) -> bool:
        """用户名是否已被占用（包括软删除用户）"""
        cursor = await self._conn.execute(
            "SELECT 1 FROM users WHERE username = ? LIMIT 1",
            (username,),
        )
        return await cursor.fetchone() is not None

    async def list_users(self, page_request: PageRequest) -> tuple[list[User], int]:
        """分页查询用户，按 created_at 倒序"""
        cursor = await self._conn.execute("SELECT COUNT(*) FROM users WHERE deleted = 0")
        row = await cursor.fetchone()
        total = row[0] if row else 0

        cursor = await self._conn.execute(
            f"""
            SELECT {_USER_COLUMNS} FROM users
            WHERE deleted = 0
            ORDER BY created_at DESC, user_id ASC
            LIMIT ? OFFSET ?
            """,
            (page_request.size, page_request.offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_user(r) for r in rows], total

    async def update_user(self, user: User) -> bool:
        """写回用户全名"""
        cursor = await self._conn.execute(
            "UPDATE users SET full_name = ? WHERE user_id = ? AND deleted = 0",
            (user.full_name, user.user_id),
        )
        return cursor.rowcount > 0

    async def soft_delete_user(self, user: User) -> bool:
        """持久化软删除标记"""
        cursor = await self._conn.execute(
            "UPDATE users SET deleted = 1, deleted_at = ? WHERE user_id = ? AND deleted = 0",
            (
                to_db_timestamp(user.deleted_at) if user.deleted_at else None,
                user.user_id,
            ),
        )
        return cursor.rowcount > 0

    async def count_users(self) -> int:
        cursor = await self._conn.execute("SELECT COUNT(*) FROM users WHERE deleted = 0")
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """将数据库行转换为 User 模型"""
        return User(
            user_id=row[0],
            username=row[1],
            full_name=row[2],
            created_at=datetime.fromisoformat(row[3]),
            deleted=bool(row[4]),
            deleted_at=datetime.fromisoformat(row[5]) if row[5] else None,
        )
