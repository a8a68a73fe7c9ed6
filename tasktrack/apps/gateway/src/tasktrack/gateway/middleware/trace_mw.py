"""TraceMiddleware

从资源路径中提取 task_id / user_id 绑定到 structlog context，
使同一资源的操作日志可以关联检索。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# 路径段 -> context 键
_RESOURCE_KEYS = {
    "tasks": "task_id",
    "users": "user_id",
}


def extract_resource_ids(path: str) -> dict[str, str]:
    """从 /api/tasks/{task_id} 或 /api/users/{user_id} 提取资源标识"""
    parts = [p for p in path.split("/") if p]
    found: dict[str, str] = {}
    for i, part in enumerate(parts):
        key = _RESOURCE_KEYS.get(part)
        if key and i + 1 < len(parts):
            found[key] = parts[i + 1]
    return found


class TraceMiddleware(BaseHTTPMiddleware):
    """资源级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        resource_ids = extract_resource_ids(request.url.path)
        if resource_ids:
            structlog.contextvars.bind_contextvars(**resource_ids)

        return await call_next(request)
