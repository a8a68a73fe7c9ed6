"""TaskTrack Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import DEFAULT_TASK_STATUS, Priority, Severity, TaskStatus, TaskType
from .page import Page, PageRequest
from .requests import (
    CreateDefectRequest,
    CreateFeatureRequest,
    CreateTaskRequest,
    CreateUserRequest,
    UpdateDefectRequest,
    UpdateFeatureRequest,
    UpdateTaskRequest,
    UpdateUserRequest,
    parse_create_task,
    parse_model,
    parse_update_task,
)
from .task import DefectDetails, FeatureDetails, Task, TaskDetails
from .user import User

__all__ = [
    # 枚举
    "TaskType",
    "TaskStatus",
    "Severity",
    "Priority",
    "DEFAULT_TASK_STATUS",
    # Task
    "Task",
    "TaskDetails",
    "DefectDetails",
    "FeatureDetails",
    # User
    "User",
    # 分页
    "Page",
    "PageRequest",
    # 请求
    "CreateTaskRequest",
    "CreateDefectRequest",
    "CreateFeatureRequest",
    "UpdateTaskRequest",
    "UpdateDefectRequest",
    "UpdateFeatureRequest",
    "CreateUserRequest",
    "UpdateUserRequest",
    "parse_create_task",
    "parse_update_task",
    "parse_model",
]
