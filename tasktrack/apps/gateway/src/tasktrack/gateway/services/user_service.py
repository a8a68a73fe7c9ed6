"""UserService -- 用户创建/查询/更新/软删除

用户名唯一性检查覆盖软删除用户：已删除用户的用户名不能被重新注册。
删除用户不会影响已指派给该用户的任务。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from tasktrack.core.exceptions import ConflictError, NotFoundError
from tasktrack.core.models import (
    CreateUserRequest,
    Page,
    PageRequest,
    UpdateUserRequest,
    User,
)
from tasktrack.core.store import StoreGroup, transaction
from ulid import ULID

log = structlog.get_logger()


class UserService:
    """用户业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def create_user(self, request: CreateUserRequest) -> User:
        """创建用户

        Raises:
            ConflictError: 用户名已存在（包括软删除用户）
        """
        if await self._stores.user_store.username_taken(request.username):
            raise self._username_conflict(request.username)

        user = User(
            user_id=str(ULID()),
            username=request.username,
            full_name=request.full_name,
            created_at=datetime.now(UTC),
        )
        try:
            async with transaction(self._stores.conn):
                await self._stores.user_store.create_user(user)
        except aiosqlite.IntegrityError as e:
            if self._is_username_conflict(e):
                # 并发注册同名用户：唯一约束兜底
                raise self._username_conflict(request.username) from e
            raise

        log.info("user_created", user_id=user.user_id, username=user.username)
        return user

    async def get_user(self, user_id: str) -> User:
        """查询用户

        Raises:
            NotFoundError: 用户不存在或已软删除
        """
        user = await self._stores.user_store.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id, operation="get_user")
        return user

    async def list_users(self, page_request: PageRequest) -> Page[User]:
        """分页查询用户"""
        items, total = await self._stores.user_store.list_users(page_request)
        return Page[User](
            items=items,
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
        )

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> User:
        """更新用户全名（未提供则保持不变）"""
        user = await self.get_user(user_id)
        if request.full_name is not None:
            user.full_name = request.full_name

        async with transaction(self._stores.conn):
            updated = await self._stores.user_store.update_user(user)
        if not updated:
            # 加载后被并发软删除
            raise NotFoundError("user", user_id, operation="update_user")

        log.info("user_updated", user_id=user_id)
        return user

    async def delete_user(self, user_id: str) -> None:
        """软删除用户

        Raises:
            NotFoundError: 用户不存在或已软删除
        """
        user = await self.get_user(user_id)
        user.deleted = True
        user.deleted_at = datetime.now(UTC)

        async with transaction(self._stores.conn):
            deleted = await self._stores.user_store.soft_delete_user(user)
        if not deleted:
            raise NotFoundError("user", user_id, operation="delete_user")

        log.info("user_soft_deleted", user_id=user_id)

    @staticmethod
    def _username_conflict(username: str) -> ConflictError:
        return ConflictError(
            f"User with username {username} already exists",
            operation="create_user",
            identifier=username,
            reason="username_taken",
            code="USER_ALREADY_EXISTS",
        )

    @staticmethod
    def _is_username_conflict(error: Exception) -> bool:
        if not isinstance(error, aiosqlite.IntegrityError):
            return False
        return "users.username" in str(error)
