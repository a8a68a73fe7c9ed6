"""apps/gateway 测试配置 -- httpx AsyncClient + 手动初始化的 StoreGroup"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktrack.core.store import create_store_group

_ENV_KEYS = ["TASKTRACK_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE"]


@pytest_asyncio.fixture
async def store_group(tmp_path: Path):
    """Gateway 测试用 StoreGroup"""
    group = await create_store_group(str(tmp_path / "sqlite" / "test.db"))
    yield group
    await group.conn.close()


@pytest_asyncio.fixture
async def app(tmp_path: Path, store_group):
    """创建测试用 FastAPI app 实例"""
    os.environ["TASKTRACK_DB_PATH"] = str(tmp_path / "sqlite" / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from tasktrack.gateway.main import create_app

    application = create_app()
    # 手动初始化（ASGITransport 不触发 lifespan）
    application.state.store_group = store_group
    yield application

    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def deadline():
    """未来 deadline（ISO 日期字符串）"""

    def _deadline(days: int = 30) -> str:
        return (datetime.now(UTC).date() + timedelta(days=days)).isoformat()

    return _deadline


@pytest.fixture
def create_user(client):
    """通过 API 创建用户，返回用户 id"""

    async def _create(username: str, full_name: str = "Test User") -> str:
        resp = await client.post(
            "/api/users",
            json={"username": username, "fullName": full_name},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["id"]

    return _create
