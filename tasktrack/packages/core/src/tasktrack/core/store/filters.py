"""任务列表过滤条件构建

TaskFilter 中每个出现的过滤项生成一个具名谓词（TaskPredicate），
谓词同时携带 SQL 片段和等价的内存判定函数，组合逻辑不依赖数据库即可测试。
多个谓词按 AND 组合；未出现的过滤项不产生任何约束。

软删除谓词 NOT_DELETED 不由 build_predicates 生成，而是由 Store
在每个读取查询中强制加入。
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from ..models.enums import TaskStatus
from ..models.task import Task


class TaskFilter(BaseModel):
    """任务列表过滤条件（全部可选）"""

    assignee_id: str | None = Field(default=None, description="指派用户 ID")
    status: TaskStatus | None = Field(default=None, description="任务状态")
    name_contains: str | None = Field(
        default=None,
        description="名称子串（大小写不敏感）",
    )


@dataclass(frozen=True)
class TaskPredicate:
    """具名谓词：SQL 片段 + 内存判定"""

    name: str
    clause: str
    params: tuple[Any, ...]
    test: Callable[[Task], bool]

    def __call__(self, task: Task) -> bool:
        return self.test(task)


def fold_name(name: str) -> str:
    """名称归一化（写入 name_folded 列与子串匹配共用）"""
    return name.casefold()


NOT_DELETED = TaskPredicate(
    name="not_deleted",
    clause="deleted = 0",
    params=(),
    test=lambda task: not task.deleted,
)


def task_id_is(task_id: str) -> TaskPredicate:
    return TaskPredicate(
        name="task_id",
        clause="task_id = ?",
        params=(task_id,),
        test=lambda task: task.task_id == task_id,
    )


def assignee_is(user_id: str) -> TaskPredicate:
    return TaskPredicate(
        name="assignee",
        clause="assigned_user_id = ?",
        params=(user_id,),
        test=lambda task: task.assigned_user_id == user_id,
    )


def status_is(status: TaskStatus) -> TaskPredicate:
    return TaskPredicate(
        name="status",
        clause="status = ?",
        params=(status.value,),
        test=lambda task: task.status == status,
    )


def name_contains(term: str) -> TaskPredicate:
    needle = fold_name(term)
    return TaskPredicate(
        name="name_contains",
        clause="instr(name_folded, ?) > 0",
        params=(needle,),
        test=lambda task: needle in fold_name(task.name),
    )


def build_predicates(task_filter: TaskFilter) -> list[TaskPredicate]:
    """根据出现的过滤项构建谓词列表

    Args:
        task_filter: 过滤条件

    Returns:
        谓词列表（不含软删除谓词）
    """
    predicates: list[TaskPredicate] = []
    if task_filter.assignee_id:
        predicates.append(assignee_is(task_filter.assignee_id))
    if task_filter.status is not None:
        predicates.append(status_is(task_filter.status))
    if task_filter.name_contains:
        predicates.append(name_contains(task_filter.name_contains))
    return predicates


def compile_where(predicates: Sequence[TaskPredicate]) -> tuple[str, list[Any]]:
    """将谓词列表编译为 WHERE 子句和参数"""
    if not predicates:
        return "1 = 1", []
    clause = " AND ".join(f"({p.clause})" for p in predicates)
    params: list[Any] = []
    for p in predicates:
        params.extend(p.params)
    return clause, params


def matches_all(predicates: Iterable[TaskPredicate], task: Task) -> bool:
    """内存中判定任务是否满足全部谓词"""
    return all(p(task) for p in predicates)
