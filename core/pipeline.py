"""
分析记录提取管道

把模型返回的不可靠文本转换为合法的 AnalysisRecord，或返回带标签的错误。

流程：规范化 → 直接解析 → (失败时) 定位边界 → 语法修复 → 再次解析
      → 结构校验 → 字段修复。

每个阶段都是纯函数，不共享可变状态，可在多个线程中并发调用。
管道内部不做重试；是否重新请求模型由调用方决定。
"""

import logging
from collections.abc import Mapping
from typing import Any

from config.constants import DiagnosticLimits
from config.env_loader import ExtractionSettings, get_settings
from core.field_repair import repair_fields
from core.result import Err, Ok, Result
from core.validator import validate_payload
from utils.error_handler import BoundaryNotFound, ExtractionFailed
from utils.json_repair import (
    extract_json_object,
    parse_json_text,
    preview,
    repair_json_syntax,
    repair_with_library,
)
from utils.text_normalizer import normalize_response_text

logger = logging.getLogger(__name__)


def _parse_text(raw_text: str, settings: ExtractionSettings) -> Result:
    """规范化并解析文本，返回通用结构或提取错误"""
    normalized = normalize_response_text(raw_text)

    # 策略1：已经是干净的 JSON 对象，直接解析
    if normalized.startswith("{") and normalized.endswith("}"):
        direct = parse_json_text(normalized)
        if direct.is_ok:
            logger.debug("JSON 解析成功（策略：直接解析）")
            return direct
        logger.debug("直接解析失败，开始清理: %s", direct.error.message)

    # 策略2：定位对象边界并修复常见语法瑕疵
    extracted = extract_json_object(normalized, preview_chars=settings.preview_chars)
    if extracted.is_err:
        logger.warning(
            "模型返回中未找到 JSON 对象 (长度=%s, 预览=%s)",
            len(raw_text),
            preview(raw_text, DiagnosticLimits.LOG_PREVIEW_CHARS).replace("\n", " "),
        )
        # 诊断信息始终描述调用方传入的原始文本
        return Err(
            BoundaryNotFound(
                original_length=len(raw_text),
                original_preview=preview(raw_text, settings.preview_chars),
            )
        )

    cleaned = repair_json_syntax(extracted.value)
    parsed = parse_json_text(cleaned)
    if parsed.is_ok:
        logger.debug("JSON 解析成功（策略：清理后解析）")
        return parsed

    # 策略3（可选）：json-repair 库
    if settings.enable_library_repair:
        library_parsed = repair_with_library(cleaned)
        if library_parsed.is_ok:
            return library_parsed

    logger.warning(
        "所有解析策略均失败：%s (原始长度=%s, 清理后预览=%s)",
        parsed.error.message,
        len(raw_text),
        preview(cleaned, DiagnosticLimits.LOG_PREVIEW_CHARS).replace("\n", " "),
    )
    return Err(
        ExtractionFailed(
            original_length=len(raw_text),
            original_preview=preview(raw_text, settings.preview_chars),
            cleaned_preview=preview(cleaned, settings.preview_chars),
            cause=parsed.error,
        )
    )


def _build_record(payload: Any, settings: ExtractionSettings) -> Result:
    """校验并修复通用结构"""
    validated = validate_payload(payload)
    if validated.is_err:
        logger.warning("分析结果校验失败: %s", validated.error.message)
        return validated

    record = repair_fields(validated.value, fallback_tokens=settings.key_token_fallbacks)
    logger.debug(
        "分析结果校验成功 (title=%s, keyTokens=%s)",
        record.title,
        len(record.key_tokens),
    )
    return Ok(record)


def extract_analysis_record(raw_text: str, *, settings: ExtractionSettings | None = None) -> Result:
    """
    从模型返回的原始文本中提取分析记录

    Args:
        raw_text: 模型返回的原始文本
        settings: 管道配置，默认使用进程内共享配置

    Returns:
        Ok(AnalysisRecord) 或 Err(PipelineError 变体)
    """
    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text must be str, got {type(raw_text).__name__}")

    settings = settings or get_settings()
    logger.debug(
        "开始提取分析结果 (长度=%s, 预览=%s)",
        len(raw_text),
        preview(raw_text, DiagnosticLimits.LOG_PREVIEW_CHARS).replace("\n", " "),
    )

    parsed = _parse_text(raw_text, settings)
    if parsed.is_err:
        return parsed
    return _build_record(parsed.value, settings)


def parse_analysis_response(
    response: str | Mapping[str, Any],
    *,
    settings: ExtractionSettings | None = None,
) -> Result:
    """
    解析分析接口的响应

    字符串走完整的提取管道；已解码的对象直接进入校验和修复。

    Args:
        response: 原始文本或已解码的 JSON 对象
        settings: 管道配置

    Returns:
        Ok(AnalysisRecord) 或 Err(PipelineError 变体)
    """
    if isinstance(response, str):
        return extract_analysis_record(response, settings=settings)
    if isinstance(response, Mapping):
        return _build_record(response, settings or get_settings())
    raise TypeError(f"response must be str or mapping, got {type(response).__name__}")


class AnalysisExtractor:
    """提取管道的面向对象封装"""

    def __init__(self, settings: ExtractionSettings | None = None):
        self.settings = settings or get_settings()

    def extract(self, raw_text: str) -> Result:
        """从原始文本提取分析记录"""
        return extract_analysis_record(raw_text, settings=self.settings)

    def parse(self, response: str | Mapping[str, Any]) -> Result:
        """解析原始文本或已解码的对象"""
        return parse_analysis_response(response, settings=self.settings)


__all__ = ["extract_analysis_record", "parse_analysis_response", "AnalysisExtractor"]
