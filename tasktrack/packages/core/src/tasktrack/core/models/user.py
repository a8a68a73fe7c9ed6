"""User Domain Model

用户名在所有行（含软删除行）中唯一；软删除用户对读取路径不可见。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """User 数据模型"""

    model_config = ConfigDict(validate_assignment=True)

    user_id: str = Field(frozen=True, description="唯一标识，ULID 格式")
    username: str = Field(frozen=True, description="用户名，全局唯一")
    full_name: str = Field(description="全名")
    created_at: datetime = Field(frozen=True, description="创建时间")
    deleted: bool = Field(default=False, description="软删除标记")
    deleted_at: datetime | None = Field(default=None, description="软删除时间")
