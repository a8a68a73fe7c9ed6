"""Task Domain Model -- 带标签的变体（tagged variant）

Task 由公共字段 + details 变体负载组成，details 以 type 字段判别：
DEFECT -> DefectDetails，FEATURE -> FeatureDetails。
变体在创建时确定，之后不可替换；另一变体的字段在记录上根本不存在。
"""

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ..config import ENVIRONMENT_MAX_LENGTH, NAME_MAX_LENGTH
from ..exceptions import VariantMismatchError
from .enums import DEFAULT_TASK_STATUS, Priority, Severity, TaskStatus, TaskType


def ensure_not_blank(value: str | None) -> str | None:
    """拒绝仅含空白的字符串（None 原样返回）"""
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class DefectDetails(BaseModel):
    """DEFECT 变体负载"""

    model_config = ConfigDict(validate_assignment=True)

    type: Literal["DEFECT"] = Field(default="DEFECT", frozen=True)
    severity: Severity
    priority: Priority
    steps_to_reproduce: str | None = None
    environment: str | None = Field(default=None, max_length=ENVIRONMENT_MAX_LENGTH)


class FeatureDetails(BaseModel):
    """FEATURE 变体负载

    business_value 视为不透明值（文本描述或整数评分均可）。
    deadline 的"必须在未来"只在创建请求上校验，已存储记录过期后仍可正常加载。
    """

    model_config = ConfigDict(validate_assignment=True)

    type: Literal["FEATURE"] = Field(default="FEATURE", frozen=True)
    business_value: str | int
    deadline: date
    acceptance_criteria: str | None = None
    estimated_effort: int = Field(ge=1, description="预估工作量（故事点）")


TaskDetails = Annotated[DefectDetails | FeatureDetails, Field(discriminator="type")]

task_details_adapter: TypeAdapter[DefectDetails | FeatureDetails] = TypeAdapter(TaskDetails)


class Task(BaseModel):
    """Task 数据模型

    task_id / created_at / details 创建后冻结；其余字段赋值时重新校验。
    软删除只设置 deleted / deleted_at，记录永不物理删除。
    """

    model_config = ConfigDict(validate_assignment=True)

    task_id: str = Field(frozen=True, description="唯一标识，ULID 格式")
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH, description="任务名称")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus = Field(default=DEFAULT_TASK_STATUS, description="当前状态")
    assigned_user_id: str | None = Field(default=None, description="指派用户 ID")
    created_at: datetime = Field(frozen=True, description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    deleted: bool = Field(default=False, description="软删除标记")
    deleted_at: datetime | None = Field(default=None, description="软删除时间")
    details: TaskDetails = Field(frozen=True, description="变体负载")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return ensure_not_blank(value)

    @property
    def type(self) -> TaskType:
        """变体标签"""
        return TaskType(self.details.type)

    def variant(self) -> TaskType:
        return self.type

    def defect(self) -> DefectDetails:
        """返回 DEFECT 负载

        Raises:
            VariantMismatchError: 任务不是 DEFECT
        """
        if not isinstance(self.details, DefectDetails):
            raise VariantMismatchError(
                TaskType.DEFECT.value,
                self.type.value,
                operation="access_defect_fields",
                identifier=self.task_id,
            )
        return self.details

    def feature(self) -> FeatureDetails:
        """返回 FEATURE 负载

        Raises:
            VariantMismatchError: 任务不是 FEATURE
        """
        if not isinstance(self.details, FeatureDetails):
            raise VariantMismatchError(
                TaskType.FEATURE.value,
                self.type.value,
                operation="access_feature_fields",
                identifier=self.task_id,
            )
        return self.details
