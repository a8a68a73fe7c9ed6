"""任务路由

POST   /api/tasks: 创建任务（payload 以 type 判别 DEFECT / FEATURE）
GET    /api/tasks: 任务列表，支持 assigneeId / status / nameContains 筛选 + 分页
GET    /api/tasks/{task_id}: 任务详情
PATCH  /api/tasks/{task_id}: 部分更新（PUT 同义）
DELETE /api/tasks/{task_id}: 软删除
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from starlette.responses import JSONResponse, Response
from tasktrack.core.models import PageRequest, TaskStatus, parse_create_task, parse_update_task
from tasktrack.core.store import TaskFilter

from ..deps import get_store_group
from ..serializers import serialize_page, serialize_task
from ..services.task_service import TaskService

router = APIRouter()


@router.post("/api/tasks", status_code=201)
async def create_task(
    payload: dict[str, Any] = Body(...),
    store_group=Depends(get_store_group),
):
    """创建任务

    - 201: 创建成功
    - 400: type 缺失/无法识别、缺少必填字段、deadline 不在未来
    - 404: 指派用户不存在
    """
    request = parse_create_task(payload)
    service = TaskService(store_group)
    task = await service.create_task(request)
    return JSONResponse(status_code=201, content=serialize_task(task))


@router.get("/api/tasks")
async def list_tasks(
    assignee_id: str | None = Query(default=None, alias="assigneeId", description="按指派用户筛选"),
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    name_contains: str | None = Query(
        default=None,
        alias="nameContains",
        description="按名称子串筛选（大小写不敏感）",
    ),
    page: int = Query(default=0, description="页码，从 0 开始"),
    size: int | None = Query(default=None, description="页大小"),
    store_group=Depends(get_store_group),
):
    """查询任务列表，按 created_at 倒序"""
    page_request = PageRequest.of(page, size)
    task_filter = TaskFilter(
        assignee_id=assignee_id,
        status=status,
        name_contains=name_contains,
    )
    service = TaskService(store_group)
    result = await service.list_tasks(task_filter, page_request)
    return serialize_page(result, serialize_task)


@router.get("/api/tasks/{task_id}")
async def get_task(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """查询任务详情"""
    service = TaskService(store_group)
    task = await service.get_task(task_id)
    return serialize_task(task)


@router.api_route("/api/tasks/{task_id}", methods=["PATCH", "PUT"])
async def update_task(
    task_id: str,
    payload: dict[str, Any] = Body(...),
    store_group=Depends(get_store_group),
):
    """部分更新任务

    - 200: 更新成功
    - 400: type 与任务变体不一致或字段非法
    - 404: 任务或指派用户不存在
    """
    patch = parse_update_task(payload)
    service = TaskService(store_group)
    task = await service.update_task(task_id, patch)
    return serialize_task(task)


@router.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """软删除任务；再次删除返回 404"""
    service = TaskService(store_group)
    await service.delete_task(task_id)
    return Response(status_code=204)
