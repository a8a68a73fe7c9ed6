"""枚举定义

包含任务类型标签 TaskType、任务状态 TaskStatus，以及 Defect 专属的
Severity / Priority 枚举。
"""

from enum import StrEnum


class TaskType(StrEnum):
    """任务变体标签（线上 payload 的 type 判别字段）"""

    DEFECT = "DEFECT"
    FEATURE = "FEATURE"


class TaskStatus(StrEnum):
    """任务状态"""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CLOSED = "CLOSED"


# 创建时未指定状态则使用此默认值
DEFAULT_TASK_STATUS: TaskStatus = TaskStatus.OPEN


class Severity(StrEnum):
    """Defect 严重程度"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Priority(StrEnum):
    """Defect 优先级"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
