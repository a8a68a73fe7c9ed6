"""用户路由

POST   /api/users: 创建用户（用户名已存在返回 409）
GET    /api/users: 用户分页列表
GET    /api/users/{user_id}: 用户详情
PATCH  /api/users/{user_id}: 更新全名（PUT 同义）
DELETE /api/users/{user_id}: 软删除
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from starlette.responses import JSONResponse, Response
from tasktrack.core.models import CreateUserRequest, PageRequest, UpdateUserRequest, parse_model

from ..deps import get_store_group
from ..serializers import serialize_page, serialize_user
from ..services.user_service import UserService

router = APIRouter()


@router.post("/api/users", status_code=201)
async def create_user(
    payload: dict[str, Any] = Body(...),
    store_group=Depends(get_store_group),
):
    """创建用户"""
    request = parse_model(CreateUserRequest, payload, "create_user")
    service = UserService(store_group)
    user = await service.create_user(request)
    return JSONResponse(status_code=201, content=serialize_user(user))


@router.get("/api/users")
async def list_users(
    page: int = Query(default=0, description="页码，从 0 开始"),
    size: int | None = Query(default=None, description="页大小"),
    store_group=Depends(get_store_group),
):
    """用户分页列表"""
    service = UserService(store_group)
    result = await service.list_users(PageRequest.of(page, size))
    return serialize_page(result, serialize_user)


@router.get("/api/users/{user_id}")
async def get_user(
    user_id: str,
    store_group=Depends(get_store_group),
):
    """用户详情"""
    service = UserService(store_group)
    return serialize_user(await service.get_user(user_id))


@router.api_route("/api/users/{user_id}", methods=["PATCH", "PUT"])
async def update_user(
    user_id: str,
    payload: dict[str, Any] = Body(...),
    store_group=Depends(get_store_group),
):
    """更新用户全名"""
    request = parse_model(UpdateUserRequest, payload, "update_user")
    service = UserService(store_group)
    return serialize_user(await service.update_user(user_id, request))


@router.delete("/api/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    store_group=Depends(get_store_group),
):
    """软删除用户；已指派的任务保留引用"""
    service = UserService(store_group)
    await service.delete_user(user_id)
    return Response(status_code=204)
