"""packages/core 测试配置 -- 核心层 fixture 与数据构造辅助"""

from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from tasktrack.core.models import (
    DefectDetails,
    FeatureDetails,
    Priority,
    Severity,
    Task,
    TaskStatus,
    User,
)


def _make_user(user_id: str, username: str | None = None, created_at: datetime | None = None) -> User:
    return User(
        user_id=user_id,
        username=username or f"user-{user_id}",
        full_name="Test User",
        created_at=created_at or datetime.now(UTC),
    )


def _future_date(days: int = 30) -> date:
    return datetime.now(UTC).date() + timedelta(days=days)


def _make_defect(
    task_id: str,
    name: str = "Login fails",
    *,
    created_at: datetime | None = None,
    status: TaskStatus = TaskStatus.OPEN,
    assigned_user_id: str | None = None,
) -> Task:
    now = created_at or datetime.now(UTC)
    return Task(
        task_id=task_id,
        name=name,
        status=status,
        assigned_user_id=assigned_user_id,
        created_at=now,
        updated_at=now,
        details=DefectDetails(severity=Severity.HIGH, priority=Priority.MEDIUM),
    )


def _make_feature(
    task_id: str,
    name: str = "Dark mode",
    *,
    created_at: datetime | None = None,
    status: TaskStatus = TaskStatus.OPEN,
    assigned_user_id: str | None = None,
) -> Task:
    now = created_at or datetime.now(UTC)
    return Task(
        task_id=task_id,
        name=name,
        status=status,
        assigned_user_id=assigned_user_id,
        created_at=now,
        updated_at=now,
        details=FeatureDetails(
            business_value="High",
            deadline=_future_date(),
            estimated_effort=5,
        ),
    )


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def core_db(core_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """核心层已初始化数据库连接"""
    from tasktrack.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(core_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest.fixture
def make_user():
    """User 构造函数"""
    return _make_user


@pytest.fixture
def make_defect():
    """DEFECT Task 构造函数"""
    return _make_defect


@pytest.fixture
def make_feature():
    """FEATURE Task 构造函数"""
    return _make_feature


@pytest.fixture
def future_date():
    """未来日期构造函数（UTC 今天 + N 天）"""
    return _future_date
