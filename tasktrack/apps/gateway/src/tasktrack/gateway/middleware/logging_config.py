"""structlog 配置

dev 模式输出可读的彩色日志，json 模式输出单行 JSON。
标准库 logging（uvicorn / aiosqlite 等）统一经过 ProcessorFormatter 渲染。
Logfire 为可选 APM，由 LOGFIRE_SEND_TO_LOGFIRE 控制。
"""

import logging
import os

import structlog

# 噪声较大的第三方 logger，固定在 WARNING
_QUIET_LOGGERS = ("aiosqlite", "uvicorn.access")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog

    Args:
        log_format: "json" 或 "dev"，缺省读取 TASKTRACK_LOG_FORMAT
        log_level: 日志级别名，缺省读取 TASKTRACK_LOG_LEVEL
    """
    log_format = log_format or os.environ.get("TASKTRACK_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKTRACK_LOG_LEVEL", "INFO")
    shared = _shared_processors()

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
        shared.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire(app) -> None:
    """按需启用 Logfire（需要 observability extra 与 LOGFIRE_TOKEN）

    初始化失败时记录警告并继续使用本地日志。
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi(app)
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
        )
