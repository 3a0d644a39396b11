"""
调用方重新请求模型的重试策略

提取管道本身从不重试。需要时，调用方可以用这里的辅助函数在提取失败后
重新向模型请求文本，直到得到合法记录或用完重试次数。
"""

import logging
from collections.abc import Callable, Iterable

import tenacity

from config.env_loader import ExtractionSettings, get_settings
from core.pipeline import extract_analysis_record
from core.result import Result
from utils.error_handler import ErrorHandler, ErrorKind

logger = logging.getLogger(__name__)


def default_requery_kinds() -> frozenset[ErrorKind]:
    """所有标记为可恢复的错误类型"""
    return frozenset(kind for kind in ErrorKind if ErrorHandler.ERROR_TEMPLATES[kind]["recoverable"])


def build_requery_retryer(
    settings: ExtractionSettings,
    retry_kinds: Iterable[ErrorKind],
) -> tenacity.Retrying:
    """
    创建按结果重试的Tenacity重试器

    结果为 Err 且错误类型在 retry_kinds 中时重试；重试用尽时返回最后一次结果，
    而不是抛出 RetryError。

    Args:
        settings: 提供重试次数和等待参数
        retry_kinds: 需要重新请求的错误类型

    Returns:
        Tenacity重试器实例
    """
    kinds = frozenset(retry_kinds)

    def _should_requery(result: Result) -> bool:
        return result.is_err and result.error.kind in kinds

    return tenacity.Retrying(
        wait=tenacity.wait_random_exponential(
            multiplier=settings.requery_wait_multiplier,
            max=settings.requery_max_wait,
        ),
        stop=tenacity.stop_after_attempt(settings.requery_max_attempts),
        retry=tenacity.retry_if_result(_should_requery),
        before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
    )


def extract_with_requery(
    fetch_raw_text: Callable[[], str],
    *,
    settings: ExtractionSettings | None = None,
    retry_kinds: Iterable[ErrorKind] | None = None,
) -> Result:
    """
    请求模型文本并提取记录，失败时重新请求

    Args:
        fetch_raw_text: 无参数函数，每次调用返回一份新的模型原始文本
        settings: 管道配置
        retry_kinds: 需要重新请求的错误类型，默认所有可恢复类型

    Returns:
        最后一次提取的 Result；fetch_raw_text 抛出的异常会原样传播
    """
    settings = settings or get_settings()
    kinds = default_requery_kinds() if retry_kinds is None else frozenset(retry_kinds)
    retryer = build_requery_retryer(settings, kinds)

    def _attempt() -> Result:
        return extract_analysis_record(fetch_raw_text(), settings=settings)

    result = retryer(_attempt)
    if result.is_err:
        logger.warning(
            "重新请求后仍未得到合法记录 (最多 %s 次): %s",
            settings.requery_max_attempts,
            result.error.message,
        )
    return result


__all__ = ["default_requery_kinds", "build_requery_retryer", "extract_with_requery"]
