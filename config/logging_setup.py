from __future__ import annotations

import inspect
import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .env_loader import ExtractionSettings  # pragma: no cover


class InterceptHandler(logging.Handler):
    """把标准 logging 记录转发给 loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        # 获取对应的 loguru 级别
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 找到调用者，跳过 logging 模块自身的帧
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(settings: ExtractionSettings) -> None:
    """配置日志输出（使用 loguru，自动拦截标准 logging）"""
    logger.remove()

    # 配置标准 logging 使用拦截器，这样所有模块无需修改就能使用 loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # 控制台日志（带颜色）
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {name}:{line} - <level>{message}</level>",
        level=settings.console_log_level,
        colorize=True,
    )

    # 文件日志：10MB 轮转，保留 7 天，自动压缩
    if settings.log_file_path:
        logger.add(
            settings.log_file_path,
            format="{time:YYYY-MM-DD HH:mm:ss} - {level} - [{file}:{line}] - {message}",
            level=settings.log_level,
            encoding="utf-8",
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            enqueue=True,
        )

    # 静默第三方库日志
    for noisy_logger in ("tenacity", "urllib3"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    logger.debug(
        "日志记录已初始化（loguru + 标准 logging 拦截）。控制台级别: {}, 文件: {}",
        settings.console_log_level,
        settings.log_file_path or "无",
    )


__all__ = ["InterceptHandler", "setup_logging", "logger"]
