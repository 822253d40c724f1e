from __future__ import annotations

import logging

import structlog


def configure_logging(level: int = logging.INFO) -> None:
    """設定結構化日誌格式。"""

    logging.basicConfig(
        level=level,
        format="%(message)s",
    )
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
    )


def resolve_level(name: str) -> int:
    """將 LOG_LEVEL 名稱轉為 logging 等級，未知名稱視為 INFO。"""

    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO
