"""FastAPI lifespan 测试

测试内容：
1. 启动时 DB 初始化
2. 关闭时连接清理
"""

from pathlib import Path

from fastapi import FastAPI
from tasktrack.gateway.main import lifespan


class TestLifespan:
    """Lifespan 测试"""

    async def test_store_group_initialized_and_closed(self, monkeypatch, tmp_path: Path):
        db_path = tmp_path / "nested" / "life.db"
        monkeypatch.setenv("TASKTRACK_DB_PATH", str(db_path))
        app = FastAPI()

        async with lifespan(app):
            store_group = app.state.store_group
            assert store_group is not None
            cursor = await store_group.conn.execute("SELECT COUNT(*) FROM tasks")
            assert (await cursor.fetchone())[0] == 0

        assert db_path.exists()
