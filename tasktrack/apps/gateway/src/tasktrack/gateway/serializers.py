"""线上表示序列化

Task 读表示：
    {id, type, name, description, status, assignedUserId, createdAt, updatedAt,
     <当前变体字段>}
列表响应：
    {items, page, size, totalElements, totalPages, hasNext, hasPrevious}
"""

from typing import Any

from pydantic.alias_generators import to_camel
from tasktrack.core.models import Page, Task, User


def serialize_task(task: Task) -> dict[str, Any]:
    """Task -> 读表示（仅包含自身变体的字段）"""
    data: dict[str, Any] = {
        "id": task.task_id,
        "type": task.type.value,
        "name": task.name,
        "description": task.description,
        "status": task.status.value,
        "assignedUserId": task.assigned_user_id,
        "createdAt": task.created_at.isoformat(),
        "updatedAt": task.updated_at.isoformat(),
    }
    details = task.details.model_dump(mode="json", exclude={"type"})
    data.update({to_camel(key): value for key, value in details.items()})
    return data


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": user.user_id,
        "username": user.username,
        "fullName": user.full_name,
        "createdAt": user.created_at.isoformat(),
    }


def serialize_page(page: Page, item_serializer) -> dict[str, Any]:
    """分页结果 -> 列表响应"""
    return {
        "items": [item_serializer(item) for item in page.items],
        "page": page.page,
        "size": page.size,
        "totalElements": page.total_elements,
        "totalPages": page.total_pages,
        "hasNext": page.has_next,
        "hasPrevious": page.has_previous,
    }
