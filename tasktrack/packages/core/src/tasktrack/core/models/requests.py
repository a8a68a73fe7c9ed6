"""请求 payload 模型 -- 线上表示与内部模型之间的映射

创建/更新请求都以 type 字段（DEFECT | FEATURE）作为判别标签。
线上字段使用 camelCase（同时接受 snake_case），未知字段一律拒绝，
因此另一变体的专属字段出现在 payload 中会被视为非法请求。
"""

from datetime import UTC, date, datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ..config import (
    ENVIRONMENT_MAX_LENGTH,
    FULL_NAME_MAX_LENGTH,
    FULL_NAME_MIN_LENGTH,
    NAME_MAX_LENGTH,
)
from ..exceptions import BadRequestError
from .enums import Priority, Severity, TaskStatus, TaskType
from .task import DefectDetails, FeatureDetails, ensure_not_blank, task_details_adapter

WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)

# 公共字段（其余非 type 字段均属于变体负载）
COMMON_FIELDS: frozenset[str] = frozenset(
    {"name", "description", "assigned_user_id", "status"}
)

# 判别标签缺失或无法识别时 pydantic 的错误类型
_TAG_ERROR_TYPES = {"union_tag_not_found", "union_tag_invalid"}


def validation_details(error: ValidationError) -> list[dict[str, Any]]:
    """将 pydantic ValidationError 转换为可序列化的字段错误列表"""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def _today() -> date:
    return datetime.now(UTC).date()


# ============================================================
# 创建请求
# ============================================================


class _CreateTaskBase(BaseModel):
    """创建请求公共字段"""

    model_config = WIRE_CONFIG

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH, description="任务名称")
    description: str | None = Field(default=None, description="任务描述")
    assigned_user_id: str | None = Field(default=None, description="指派用户 ID")
    status: TaskStatus | None = Field(default=None, description="初始状态，缺省为 OPEN")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return ensure_not_blank(value)

    def to_details(self) -> DefectDetails | FeatureDetails:
        """提取变体负载"""
        return task_details_adapter.validate_python(
            self.model_dump(exclude=set(COMMON_FIELDS))
        )


class CreateDefectRequest(_CreateTaskBase):
    """DEFECT 创建请求"""

    type: Literal["DEFECT"]
    severity: Severity
    priority: Priority
    steps_to_reproduce: str | None = None
    environment: str | None = Field(default=None, max_length=ENVIRONMENT_MAX_LENGTH)


class CreateFeatureRequest(_CreateTaskBase):
    """FEATURE 创建请求"""

    type: Literal["FEATURE"]
    business_value: str | int
    deadline: date
    acceptance_criteria: str | None = None
    estimated_effort: int = Field(ge=1)

    @field_validator("deadline")
    @classmethod
    def _deadline_in_future(cls, value: date) -> date:
        if value <= _today():
            raise ValueError("deadline must be in the future")
        return value


CreateTaskRequest = Annotated[
    CreateDefectRequest | CreateFeatureRequest,
    Field(discriminator="type"),
]


# ============================================================
# 更新请求（所有字段可选，仅应用非空字段）
# ============================================================


class _UpdateTaskBase(BaseModel):
    """更新请求公共字段"""

    model_config = WIRE_CONFIG

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = None
    assigned_user_id: str | None = None
    status: TaskStatus | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str | None:
        return ensure_not_blank(value)

    @property
    def task_type(self) -> TaskType:
        return TaskType(self.type)  # type: ignore[attr-defined]

    def common_changes(self) -> dict[str, Any]:
        """出现在 patch 中的公共字段"""
        return self.model_dump(include=set(COMMON_FIELDS), exclude_none=True)

    def detail_changes(self) -> dict[str, Any]:
        """出现在 patch 中的变体字段"""
        return self.model_dump(
            exclude=set(COMMON_FIELDS) | {"type"},
            exclude_none=True,
        )


class UpdateDefectRequest(_UpdateTaskBase):
    """DEFECT 更新请求"""

    type: Literal["DEFECT"]
    severity: Severity | None = None
    priority: Priority | None = None
    steps_to_reproduce: str | None = None
    environment: str | None = Field(default=None, max_length=ENVIRONMENT_MAX_LENGTH)


class UpdateFeatureRequest(_UpdateTaskBase):
    """FEATURE 更新请求"""

    type: Literal["FEATURE"]
    business_value: str | int | None = None
    deadline: date | None = None
    acceptance_criteria: str | None = None
    estimated_effort: int | None = Field(default=None, ge=1)


UpdateTaskRequest = Annotated[
    UpdateDefectRequest | UpdateFeatureRequest,
    Field(discriminator="type"),
]


# ============================================================
# 用户请求
# ============================================================


class CreateUserRequest(BaseModel):
    """用户创建请求"""

    model_config = WIRE_CONFIG

    username: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=FULL_NAME_MAX_LENGTH)

    @field_validator("username", "full_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return ensure_not_blank(value)


class UpdateUserRequest(BaseModel):
    """用户更新请求（仅允许修改全名）"""

    model_config = WIRE_CONFIG

    full_name: str | None = Field(
        default=None,
        min_length=FULL_NAME_MIN_LENGTH,
        max_length=FULL_NAME_MAX_LENGTH,
    )

    @field_validator("full_name")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        return ensure_not_blank(value)


# ============================================================
# payload 解析
# ============================================================

create_task_adapter: TypeAdapter[CreateDefectRequest | CreateFeatureRequest] = TypeAdapter(
    CreateTaskRequest
)
update_task_adapter: TypeAdapter[UpdateDefectRequest | UpdateFeatureRequest] = TypeAdapter(
    UpdateTaskRequest
)


def _to_bad_request(error: ValidationError, operation: str) -> BadRequestError:
    details = validation_details(error)
    if any(d["type"] in _TAG_ERROR_TYPES for d in details):
        return BadRequestError(
            "Invalid task type. Must be either DEFECT or FEATURE",
            operation=operation,
            reason="invalid_task_type",
            details=details,
        )
    summary = "; ".join(f"{d['field'] or 'body'}: {d['message']}" for d in details)
    return BadRequestError(
        f"Invalid request payload: {summary}",
        operation=operation,
        reason="invalid_payload",
        details=details,
    )


def parse_create_task(payload: Any) -> CreateDefectRequest | CreateFeatureRequest:
    """解析创建 payload

    Raises:
        BadRequestError: type 缺失/无法识别、缺少必填字段、字段非法
    """
    try:
        return create_task_adapter.validate_python(payload)
    except ValidationError as e:
        raise _to_bad_request(e, "create_task") from e


def parse_update_task(payload: Any) -> UpdateDefectRequest | UpdateFeatureRequest:
    """解析更新 payload

    Raises:
        BadRequestError: type 缺失/无法识别、字段非法
    """
    try:
        return update_task_adapter.validate_python(payload)
    except ValidationError as e:
        raise _to_bad_request(e, "update_task") from e


def parse_model(model_cls: type[BaseModel], payload: Any, operation: str) -> Any:
    """解析任意请求模型，校验失败转换为 BadRequestError"""
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        raise _to_bad_request(e, operation) from e
