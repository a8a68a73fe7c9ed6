"""TaskTrack 异常体系

所有业务失败都以带类型的异常向上传递，由传输层映射为用户可见响应。
每个异常携带 operation / identifier / reason 上下文，便于调用方记录日志。
"""

from typing import Any


class TaskTrackError(Exception):
    """TaskTrack 基础异常"""

    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        identifier: str | None = None,
        reason: str = "",
        details: list[dict[str, Any]] | None = None,
        code: str | None = None,
    ) -> None:
        """
        Args:
            message: 错误描述
            operation: 失败的操作名（如 create_task）
            identifier: 相关资源标识
            reason: 失败原因（机器可读短语）
            details: 字段级错误明细
            code: 覆盖默认错误码
        """
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.identifier = identifier
        self.reason = reason
        self.details = details or []
        if code is not None:
            self.code = code

    @property
    def context(self) -> dict[str, Any]:
        """日志上下文"""
        return {
            "operation": self.operation,
            "identifier": self.identifier,
            "reason": self.reason,
        }


class NotFoundError(TaskTrackError):
    """资源不存在（或已软删除）"""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str, operation: str = "") -> None:
        super().__init__(
            f"{resource.capitalize()} with id {identifier} does not exist",
            operation=operation,
            identifier=identifier,
            reason=f"{resource}_not_found",
            code=f"{resource.upper()}_NOT_FOUND",
        )
        self.resource = resource


class BadRequestError(TaskTrackError):
    """请求内容非法：缺少必填字段、类型标签缺失/无法识别、字段取值非法等"""

    code = "BAD_REQUEST"


class VariantMismatchError(BadRequestError):
    """任务变体不匹配

    更新请求的类型标签与已存储任务不一致，或访问了另一变体的专属字段。
    """

    code = "TASK_TYPE_MISMATCH"

    def __init__(
        self,
        expected: str,
        actual: str,
        *,
        operation: str = "",
        identifier: str | None = None,
    ) -> None:
        super().__init__(
            f"Task type mismatch: task is {actual}, got {expected}",
            operation=operation,
            identifier=identifier,
            reason="task_type_mismatch",
        )
        self.expected = expected
        self.actual = actual


class ConflictError(TaskTrackError):
    """标识冲突（仅用户管理使用，如用户名已存在）"""

    code = "CONFLICT"
