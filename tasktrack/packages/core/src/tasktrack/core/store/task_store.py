"""TaskStore SQLite 实现

所有读取查询强制加入 NOT_DELETED 谓词，软删除行对读取路径完全不可见。
写方法不自动提交事务，需由调用方通过 transaction() 管理。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.page import PageRequest
from ..models.task import Task, task_details_adapter
from .filters import (
    NOT_DELETED,
    TaskFilter,
    TaskPredicate,
    build_predicates,
    compile_where,
    fold_name,
    task_id_is,
)

_TASK_COLUMNS = (
    "task_id, type, name, description, status, assigned_user_id, details, "
    "created_at, updated_at, deleted, deleted_at"
)


def to_db_timestamp(value: datetime) -> str:
    """统一时间戳格式（固定微秒精度，保证字典序与时间序一致）"""
    return value.isoformat(timespec="microseconds")


def _from_db_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_TASK_COLUMNS}, name_folded)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.task_id,
                task.type.value,
                task.name,
                task.description,
                task.status.value,
                task.assigned_user_id,
                task.details.model_dump_json(exclude={"type"}),
                to_db_timestamp(task.created_at),
                to_db_timestamp(task.updated_at),
                int(task.deleted),
                to_db_timestamp(task.deleted_at) if task.deleted_at else None,
                fold_name(task.name),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务（软删除任务返回 None）"""
        where, params = self._where([task_id_is(task_id)])
        cursor = await self._conn.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE {where}",
            params,
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(
        self,
        task_filter: TaskFilter,
        page_request: PageRequest,
    ) -> tuple[list[Task], int]:
        """按过滤条件分页查询任务

        排序：created_at 倒序，task_id 正序（同一时间戳下保证确定性）。

        Returns:
            (当前页任务列表, 满足条件的总数)
        """
        where, params = self._where(build_predicates(task_filter))

        cursor = await self._conn.execute(
            f"SELECT COUNT(*) FROM tasks WHERE {where}",
            params,
        )
        row = await cursor.fetchone()
        total = row[0] if row else 0

        cursor = await self._conn.execute(
            f"""
            SELECT {_TASK_COLUMNS} FROM tasks
            WHERE {where}
            ORDER BY created_at DESC, task_id ASC
            LIMIT ? OFFSET ?
            """,
            [*params, page_request.size, page_request.offset],
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(r) for r in rows], total

    async def update_task(self, task: Task) -> bool:
        """写回任务的可变字段

        Returns:
            True 如果命中了未删除的任务行
        """
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET name = ?, name_folded = ?, description = ?, status = ?,
                assigned_user_id = ?, details = ?, updated_at = ?
            WHERE task_id = ? AND deleted = 0
            """,
            (
                task.name,
                fold_name(task.name),
                task.description,
                task.status.value,
                task.assigned_user_id,
                task.details.model_dump_json(exclude={"type"}),
                to_db_timestamp(task.updated_at),
                task.task_id,
            ),
        )
        return cursor.rowcount > 0

    async def soft_delete_task(self, task: Task) -> bool:
        """持久化软删除标记

        Returns:
            True 如果命中了未删除的任务行
        """
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET deleted = 1, deleted_at = ?, updated_at = ?
            WHERE task_id = ? AND deleted = 0
            """,
            (
                to_db_timestamp(task.deleted_at or task.updated_at),
                to_db_timestamp(task.updated_at),
                task.task_id,
            ),
        )
        return cursor.rowcount > 0

    async def count_by_type_and_status(self) -> list[tuple[str, str, int]]:
        """按类型和状态统计未删除任务数量"""
        where, params = self._where([])
        cursor = await self._conn.execute(
            f"""
            SELECT type, status, COUNT(*) FROM tasks
            WHERE {where}
            GROUP BY type, status
            ORDER BY type, status
            """,
            params,
        )
        rows = await cursor.fetchall()
        return [(r[0], r[1], r[2]) for r in rows]

    @staticmethod
    def _where(predicates: list[TaskPredicate]) -> tuple[str, list]:
        """编译 WHERE 子句，强制加入软删除谓词"""
        return compile_where([NOT_DELETED, *predicates])

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        details_data = json.loads(row[6]) if row[6] else {}
        details_data["type"] = row[1]
        return Task(
            task_id=row[0],
            name=row[2],
            description=row[3],
            status=row[4],
            assigned_user_id=row[5],
            details=task_details_adapter.validate_python(details_data),
            created_at=datetime.fromisoformat(row[7]),
            updated_at=datetime.fromisoformat(row[8]),
            deleted=bool(row[9]),
            deleted_at=_from_db_timestamp(row[10]),
        )
