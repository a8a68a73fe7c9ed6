"""分页模型

PageRequest: 零基页码 + 页大小（超过上限时截断）。
Page: 当前页数据 + 总数，派生 total_pages / has_next / has_previous。
"""

import math
from typing import Generic, TypeVar

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from ..config import get_default_page_size, get_max_page_size
from ..exceptions import BadRequestError
from .requests import validation_details

T = TypeVar("T")

# SQLite INTEGER 上限（OFFSET 参数不能超过）
SQLITE_MAX_INTEGER = 2**63 - 1


class PageRequest(BaseModel):
    """分页请求"""

    page: int = Field(default=0, ge=0, description="页码，从 0 开始")
    size: int = Field(
        default_factory=get_default_page_size,
        ge=1,
        validate_default=True,
        description="页大小",
    )

    @field_validator("size")
    @classmethod
    def _clamp_size(cls, value: int) -> int:
        return min(value, get_max_page_size())

    @model_validator(mode="after")
    def _offset_in_range(self) -> "PageRequest":
        if self.offset > SQLITE_MAX_INTEGER:
            raise ValueError("page is too large")
        return self

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def of(cls, page: int = 0, size: int | None = None) -> "PageRequest":
        """构造分页请求，非法参数转换为 BadRequestError"""
        kwargs: dict = {"page": page}
        if size is not None:
            kwargs["size"] = size
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise BadRequestError(
                "Invalid pagination parameters",
                operation="paginate",
                reason="invalid_page_request",
                details=validation_details(e),
            ) from e


class Page(BaseModel, Generic[T]):
    """分页结果"""

    items: list[T] = Field(default_factory=list)
    page: int
    size: int
    total_elements: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.page > 0
