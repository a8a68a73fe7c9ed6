"""异常到 HTTP 响应的映射

错误响应统一格式：
    {"error": {"code": "...", "message": "...", "details": [...]}}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse
from tasktrack.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    TaskTrackError,
)

log = structlog.get_logger()

_STATUS_CODES: list[tuple[type[TaskTrackError], int]] = [
    (NotFoundError, 404),
    (BadRequestError, 400),
    (ConflictError, 409),
]


def status_code_for(error: TaskTrackError) -> int:
    for error_cls, status_code in _STATUS_CODES:
        if isinstance(error, error_cls):
            return status_code
    return 500


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: list | None = None,
) -> JSONResponse:
    content: dict = {"error": {"code": code, "message": message}}
    if details:
        content["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def handle_tasktrack_error(request: Request, exc: TaskTrackError) -> JSONResponse:
    """业务异常 -> 404 / 400 / 409"""
    status_code = status_code_for(exc)
    log.warning(
        "request_rejected",
        status_code=status_code,
        error_code=exc.code,
        error_type=type(exc).__name__,
        **exc.context,
    )
    return error_response(status_code, exc.code, exc.message, exc.details)


async def handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """路径/查询参数校验失败 -> 400"""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    log.warning("request_validation_failed", path=request.url.path, errors=len(details))
    return error_response(
        400,
        "VALIDATION_ERROR",
        "Validation failed for request parameters",
        details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskTrackError, handle_tasktrack_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
