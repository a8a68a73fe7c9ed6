"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、分页大小、字段长度限制等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKTRACK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKTRACK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "tasktrack.db"),
    )


def get_default_page_size() -> int:
    """默认分页大小"""
    return int(os.environ.get("TASKTRACK_DEFAULT_PAGE_SIZE", "10"))


def get_max_page_size() -> int:
    """分页大小上限（超过时截断到此值）"""
    return int(os.environ.get("TASKTRACK_MAX_PAGE_SIZE", "100"))


# 任务名称最大长度（按 code point 计）
NAME_MAX_LENGTH: int = 100

# Defect environment 字段最大长度
ENVIRONMENT_MAX_LENGTH: int = 100

# 用户全名长度范围
FULL_NAME_MIN_LENGTH: int = 3
FULL_NAME_MAX_LENGTH: int = 100
