"""请求 payload 解析测试

测试内容：
1. 按 type 标签解析创建/更新请求（camelCase 与 snake_case）
2. type 缺失/无法识别、缺少必填字段、跨变体字段的拒绝
3. FEATURE deadline 必须在未来
4. 更新请求仅携带出现的非空字段
5. 用户请求校验
"""

from datetime import UTC, datetime, timedelta

import pytest
from tasktrack.core.exceptions import BadRequestError
from tasktrack.core.models import (
    CreateDefectRequest,
    CreateFeatureRequest,
    CreateUserRequest,
    DefectDetails,
    FeatureDetails,
    Severity,
    TaskStatus,
    TaskType,
    UpdateDefectRequest,
    UpdateFeatureRequest,
    UpdateUserRequest,
    parse_create_task,
    parse_model,
    parse_update_task,
)


def _deadline(days: int) -> str:
    return (datetime.now(UTC).date() + timedelta(days=days)).isoformat()


DEFECT_PAYLOAD = {
    "type": "DEFECT",
    "name": "Login fails",
    "severity": "HIGH",
    "priority": "MEDIUM",
    "stepsToReproduce": "1. open login page",
    "environment": "prod",
}


def _feature_payload(**overrides) -> dict:
    payload = {
        "type": "FEATURE",
        "name": "Dark mode",
        "businessValue": "High",
        "deadline": _deadline(30),
        "estimatedEffort": 5,
    }
    payload.update(overrides)
    return payload


class TestParseCreate:
    """创建请求解析"""

    def test_defect_payload(self):
        request = parse_create_task(DEFECT_PAYLOAD)
        assert isinstance(request, CreateDefectRequest)
        assert request.status is None
        assert request.steps_to_reproduce == "1. open login page"

        details = request.to_details()
        assert isinstance(details, DefectDetails)
        assert details.severity == Severity.HIGH
        assert details.environment == "prod"

    def test_feature_payload(self):
        request = parse_create_task(_feature_payload(status="IN_PROGRESS"))
        assert isinstance(request, CreateFeatureRequest)
        assert request.status == TaskStatus.IN_PROGRESS

        details = request.to_details()
        assert isinstance(details, FeatureDetails)
        assert details.estimated_effort == 5
        assert details.business_value == "High"

    def test_snake_case_accepted(self):
        payload = {
            "type": "FEATURE",
            "name": "Export",
            "business_value": 8,
            "deadline": _deadline(10),
            "estimated_effort": 2,
            "assigned_user_id": "01JUSER0000000000000000001",
        }
        request = parse_create_task(payload)
        assert request.assigned_user_id == "01JUSER0000000000000000001"
        assert request.business_value == 8

    def test_missing_type(self):
        """缺少 type 标签"""
        payload = {k: v for k, v in DEFECT_PAYLOAD.items() if k != "type"}
        with pytest.raises(BadRequestError) as exc_info:
            parse_create_task(payload)
        assert exc_info.value.reason == "invalid_task_type"
        assert "DEFECT or FEATURE" in exc_info.value.message

    @pytest.mark.parametrize("tag", ["BUG", "defect", ""])
    def test_unknown_type(self, tag):
        """无法识别的 type 标签（大小写敏感）"""
        with pytest.raises(BadRequestError) as exc_info:
            parse_create_task({**DEFECT_PAYLOAD, "type": tag})
        assert exc_info.value.reason == "invalid_task_type"

    def test_missing_variant_field(self):
        """缺少变体必填字段"""
        payload = {k: v for k, v in DEFECT_PAYLOAD.items() if k != "severity"}
        with pytest.raises(BadRequestError) as exc_info:
            parse_create_task(payload)
        assert exc_info.value.reason == "invalid_payload"
        assert any("severity" in d["field"] for d in exc_info.value.details)

    def test_missing_name(self):
        payload = {k: v for k, v in DEFECT_PAYLOAD.items() if k != "name"}
        with pytest.raises(BadRequestError):
            parse_create_task(payload)

    def test_name_too_long(self):
        with pytest.raises(BadRequestError):
            parse_create_task({**DEFECT_PAYLOAD, "name": "n" * 101})

    def test_cross_variant_field_rejected(self):
        """DEFECT payload 携带 FEATURE 字段被拒绝"""
        with pytest.raises(BadRequestError) as exc_info:
            parse_create_task({**DEFECT_PAYLOAD, "businessValue": "High"})
        assert exc_info.value.reason == "invalid_payload"

    @pytest.mark.parametrize("days", [0, -1])
    def test_deadline_must_be_future(self, days):
        """deadline 为今天或过去均被拒绝"""
        with pytest.raises(BadRequestError) as exc_info:
            parse_create_task(_feature_payload(deadline=_deadline(days)))
        assert any("deadline" in d["field"] for d in exc_info.value.details)

    def test_estimated_effort_positive(self):
        with pytest.raises(BadRequestError):
            parse_create_task(_feature_payload(estimatedEffort=0))

    def test_unknown_status(self):
        with pytest.raises(BadRequestError):
            parse_create_task({**DEFECT_PAYLOAD, "status": "ARCHIVED"})


class TestParseUpdate:
    """更新请求解析"""

    def test_only_present_fields(self):
        patch = parse_update_task({"type": "FEATURE", "estimatedEffort": 8})
        assert isinstance(patch, UpdateFeatureRequest)
        assert patch.task_type == TaskType.FEATURE
        assert patch.common_changes() == {}
        assert patch.detail_changes() == {"estimated_effort": 8}

    def test_null_fields_ignored(self):
        """显式 null 与缺省等价"""
        patch = parse_update_task(
            {"type": "DEFECT", "name": None, "status": "DONE", "severity": None}
        )
        assert isinstance(patch, UpdateDefectRequest)
        assert patch.common_changes() == {"status": TaskStatus.DONE}
        assert patch.detail_changes() == {}

    def test_update_requires_type(self):
        with pytest.raises(BadRequestError) as exc_info:
            parse_update_task({"name": "x"})
        assert exc_info.value.reason == "invalid_task_type"

    def test_cross_variant_field_rejected(self):
        with pytest.raises(BadRequestError):
            parse_update_task({"type": "DEFECT", "deadline": _deadline(5)})

    def test_past_deadline_allowed_on_update(self):
        """deadline 的未来约束只在创建时校验"""
        patch = parse_update_task({"type": "FEATURE", "deadline": _deadline(-3)})
        assert "deadline" in patch.detail_changes()

    def test_blank_name_rejected(self):
        with pytest.raises(BadRequestError):
            parse_update_task({"type": "DEFECT", "name": "  "})


class TestUserRequests:
    """用户请求校验"""

    def test_create_user(self):
        request = parse_model(
            CreateUserRequest,
            {"username": "alice", "fullName": "Alice Liddell"},
            "create_user",
        )
        assert request.full_name == "Alice Liddell"

    def test_create_user_missing_username(self):
        with pytest.raises(BadRequestError):
            parse_model(CreateUserRequest, {"fullName": "Alice"}, "create_user")

    def test_update_full_name_length(self):
        """全名长度 3-100"""
        with pytest.raises(BadRequestError):
            parse_model(UpdateUserRequest, {"fullName": "Al"}, "update_user")
        request = parse_model(UpdateUserRequest, {"fullName": "Ali"}, "update_user")
        assert request.full_name == "Ali"

    def test_update_blank_full_name(self):
        with pytest.raises(BadRequestError):
            parse_model(UpdateUserRequest, {"fullName": "   "}, "update_user")

    def test_update_username_not_allowed(self):
        with pytest.raises(BadRequestError):
            parse_model(UpdateUserRequest, {"username": "bob"}, "update_user")
