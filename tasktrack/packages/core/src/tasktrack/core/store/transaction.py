"""事务封装

Store 写方法不自动提交，由调用方在 transaction() 上下文中完成提交；
上下文内抛出任何异常都会回滚后原样抛出。

同一连接上的 transaction() 互斥执行：共享连接只有一个 SQLite 事务，
一个请求的回滚不能带走另一个请求已执行但未提交的写入。
"""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

_write_locks: "weakref.WeakKeyDictionary[aiosqlite.Connection, asyncio.Lock]" = (
    weakref.WeakKeyDictionary()
)


def write_lock(conn: aiosqlite.Connection) -> asyncio.Lock:
    """返回连接对应的写锁（按连接懒创建）"""
    lock = _write_locks.get(conn)
    if lock is None:
        lock = asyncio.Lock()
        _write_locks[conn] = lock
    return lock


@asynccontextmanager
async def transaction(conn: aiosqlite.Connection) -> AsyncIterator[aiosqlite.Connection]:
    """在同一连接上原子提交一组写操作

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）

    Raises:
        Exception: 上下文内的异常，回滚后重新抛出
    """
    async with write_lock(conn):
        try:
            yield conn
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
