"""Store Protocol 接口定义

定义 TaskStore、UserStore 以及任务核心所依赖的只读 UserDirectory 抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from ..models.page import PageRequest
from ..models.task import Task
from ..models.user import User
from .filters import TaskFilter


class TaskStore(Protocol):
    """Task 存储接口

    所有读取方法对软删除任务不可见。
    """

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def list_tasks(
        self,
        task_filter: TaskFilter,
        page_request: PageRequest,
    ) -> tuple[list[Task], int]:
        """按过滤条件分页查询，返回 (当前页, 总数)"""
        ...

    async def update_task(self, task: Task) -> bool:
        """写回任务可变字段"""
        ...

    async def soft_delete_task(self, task: Task) -> bool:
        """持久化软删除标记"""
        ...

    async def count_by_type_and_status(self) -> list[tuple[str, str, int]]:
        """按类型和状态统计未删除任务"""
        ...


class UserDirectory(Protocol):
    """任务核心所需的用户只读视图"""

    async def exists(self, user_id: str) -> bool:
        """用户是否存在且未删除"""
        ...

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户"""
        ...


class UserStore(UserDirectory, Protocol):
    """User 存储接口"""

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        ...

    async def username_taken(self, username: str) -> bool:
        """用户名是否已被占用（包括软删除用户）"""
        ...

    async def list_users(self, page_request: PageRequest) -> tuple[list[User], int]:
        """分页查询用户"""
        ...

    async def update_user(self, user: User) -> bool:
        """写回用户可变字段"""
        ...

    async def soft_delete_user(self, user: User) -> bool:
        """持久化软删除标记"""
        ...

    async def count_users(self) -> int:
        """未删除用户数量"""
        ...
