"""TaskService -- 任务创建/查询/更新/软删除业务逻辑

创建流程：
1. 校验指派用户存在
2. 由带类型标签的请求构建 Task（状态缺省 OPEN）
3. 单事务写入

更新流程：
1. 加载任务（软删除视为不存在）
2. 校验 patch 类型标签与任务变体一致（任何字段应用之前）
3. 仅应用 patch 中出现的非空字段，刷新 updated_at
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import structlog
from pydantic import ValidationError
from tasktrack.core.exceptions import BadRequestError, NotFoundError, VariantMismatchError
from tasktrack.core.models import (
    DEFAULT_TASK_STATUS,
    CreateDefectRequest,
    CreateFeatureRequest,
    Page,
    PageRequest,
    Task,
    UpdateDefectRequest,
    UpdateFeatureRequest,
)
from tasktrack.core.models.requests import validation_details
from tasktrack.core.store import StoreGroup, TaskFilter, transaction
from ulid import ULID

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def create_task(
        self,
        request: CreateDefectRequest | CreateFeatureRequest,
    ) -> Task:
        """创建任务

        Raises:
            NotFoundError: 指派用户不存在
            BadRequestError: 字段非法
        """
        if request.assigned_user_id is not None:
            await self._ensure_user_exists(request.assigned_user_id, "create_task")

        now = datetime.now(UTC)
        task_id = str(ULID())
        with _as_bad_request("create_task", task_id):
            task = Task(
                task_id=task_id,
                name=request.name,
                description=request.description,
                status=request.status or DEFAULT_TASK_STATUS,
                assigned_user_id=request.assigned_user_id,
                created_at=now,
                updated_at=now,
                details=request.to_details(),
            )

        async with transaction(self._stores.conn):
            await self._stores.task_store.create_task(task)

        log.info(
            "task_created",
            task_id=task.task_id,
            task_type=task.type.value,
            assigned_user_id=task.assigned_user_id,
        )
        return task

    async def get_task(self, task_id: str) -> Task:
        """查询任务详情

        Raises:
            NotFoundError: 任务不存在或已软删除
        """
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id, operation="get_task")
        return task

    async def list_tasks(
        self,
        task_filter: TaskFilter,
        page_request: PageRequest,
    ) -> Page[Task]:
        """按过滤条件分页查询任务

        Raises:
            NotFoundError: assignee_id 过滤项指向不存在的用户（不执行查询）
        """
        if task_filter.assignee_id:
            await self._ensure_user_exists(task_filter.assignee_id, "list_tasks")

        items, total = await self._stores.task_store.list_tasks(task_filter, page_request)
        return Page[Task](
            items=items,
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
        )

    async def update_task(
        self,
        task_id: str,
        patch: UpdateDefectRequest | UpdateFeatureRequest,
    ) -> Task:
        """部分更新任务（merge 语义）

        Raises:
            NotFoundError: 任务不存在，或 patch 中的指派用户不存在
            VariantMismatchError: patch 类型标签与任务变体不一致
            BadRequestError: 字段非法
        """
        task = await self.get_task(task_id)

        # 类型校验必须先于任何字段应用
        if patch.task_type != task.type:
            raise VariantMismatchError(
                patch.task_type.value,
                task.type.value,
                operation="update_task",
                identifier=task_id,
            )

        common = patch.common_changes()
        if "assigned_user_id" in common:
            await self._ensure_user_exists(common["assigned_user_id"], "update_task")

        details_changes = patch.detail_changes()

        # 赋值时逐字段校验；失败时内存对象直接丢弃，不会落盘
        with _as_bad_request("update_task", task_id):
            for field, value in details_changes.items():
                setattr(task.details, field, value)
            for field, value in common.items():
                setattr(task, field, value)
        task.updated_at = datetime.now(UTC)

        async with transaction(self._stores.conn):
            updated = await self._stores.task_store.update_task(task)
        if not updated:
            # 加载后被并发软删除
            raise NotFoundError("task", task_id, operation="update_task")

        log.info(
            "task_updated",
            task_id=task_id,
            fields=sorted([*common, *details_changes]),
        )
        return task

    async def delete_task(self, task_id: str) -> None:
        """软删除任务

        Raises:
            NotFoundError: 任务不存在或已软删除
        """
        task = await self.get_task(task_id)

        now = datetime.now(UTC)
        task.deleted = True
        task.deleted_at = now
        task.updated_at = now

        async with transaction(self._stores.conn):
            deleted = await self._stores.task_store.soft_delete_task(task)
        if not deleted:
            raise NotFoundError("task", task_id, operation="delete_task")

        log.info("task_soft_deleted", task_id=task_id)

    async def _ensure_user_exists(self, user_id: str, operation: str) -> None:
        """校验用户存在且未删除"""
        if not await self._stores.user_store.exists(user_id):
            raise NotFoundError("user", user_id, operation=operation)


@contextmanager
def _as_bad_request(operation: str, identifier: str) -> Iterator[None]:
    """将模型校验失败转换为 BadRequestError"""
    try:
        yield
    except ValidationError as e:
        raise BadRequestError(
            "Invalid task fields",
            operation=operation,
            identifier=identifier,
            reason="invalid_fields",
            details=validation_details(e),
        ) from e
