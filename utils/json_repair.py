"""
JSON 提取、修复和解析引擎

从模型返回的噪声文本中定位 JSON 对象、修复常见的语法瑕疵并解析。
所有函数都是纯函数，失败以 Err 的形式返回而不是抛出异常。
"""

import json
import logging
import re
from typing import Any

from json_repair import repair_json as repair_json_lib

from config.constants import DiagnosticLimits
from core.result import Err, Ok, Result
from utils.error_handler import BoundaryNotFound, JsonSyntaxError
from utils.text_normalizer import normalize_unicode_quotes, remove_control_characters

logger = logging.getLogger(__name__)

# 闭合括号前的多余逗号
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")


def _looks_like_object(text: str) -> bool:
    return text.startswith("{") and text.endswith("}")


def preview(text: str, limit: int = DiagnosticLimits.PREVIEW_CHARS) -> str:
    """截取有限长度的文本预览，用于错误对象和日志"""
    if not text:
        return ""
    return text[: max(limit, 0)]


def extract_json_object(text: str, *, preview_chars: int = DiagnosticLimits.PREVIEW_CHARS) -> Result:
    """
    定位文本中最外层的 {…} 片段

    这是贪婪的启发式方法，不是括号配对的词法分析：假定模型只输出一个顶层对象，
    并容忍前后的说明文字。截取范围是第一个 { 到最后一个 }，与正则 \{[\s\S]*\}
    的匹配相同，但只扫描两遍文本。

    Args:
        text: 规范化后的文本
        preview_chars: BoundaryNotFound 中原文预览的长度

    Returns:
        Ok(候选 JSON 文本) 或 Err(BoundaryNotFound)
    """
    if _looks_like_object(text):
        return Ok(text)

    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace != -1 and first_brace < last_brace:
        logger.debug("extract_json_object: 按首尾大括号截取 [%s:%s]", first_brace, last_brace + 1)
        return Ok(text[first_brace : last_brace + 1])

    logger.debug("extract_json_object: 未找到 JSON 对象边界 (长度=%s)", len(text))
    return Err(BoundaryNotFound(original_length=len(text), original_preview=preview(text, preview_chars)))


def remove_trailing_commas(text: str) -> str:
    """移除 } 或 ] 之前的多余逗号（中间可以有空白和换行）"""
    return TRAILING_COMMA_PATTERN.sub(r"\1", text)


def repair_json_syntax(text: str) -> str:
    """
    对候选 JSON 文本做纯文本层面的修复

    只处理已知的格式瑕疵，不改变语义内容；修复后仍可能无法解析，由解析阶段报告。

    Args:
        text: 提取出的候选 JSON 文本

    Returns:
        修复后的文本
    """
    if not text:
        return text

    repaired = remove_trailing_commas(text)
    repaired = normalize_unicode_quotes(repaired)
    repaired = remove_control_characters(repaired)

    if repaired != text:
        logger.debug("repair_json_syntax: 文本已修复 (%s -> %s)", len(text), len(repaired))
    return repaired


def _snippet_around(text: str, position: int | None) -> str:
    radius = DiagnosticLimits.SNIPPET_RADIUS
    if position is None:
        return preview(text, radius * 2)
    start = max(position - radius, 0)
    return text[start : position + radius]


def parse_json_text(text: str) -> Result:
    """
    标准 JSON 解析的薄封装

    Args:
        text: 待解析文本

    Returns:
        Ok(解析出的值) 或 Err(JsonSyntaxError)
    """
    try:
        return Ok(json.loads(text))
    except json.JSONDecodeError as exc:
        logger.debug("parse_json_text: JSON 解析失败: %s", exc)
        return Err(JsonSyntaxError(detail=exc.msg, position=exc.pos, snippet_preview=_snippet_around(text, exc.pos)))
    except RecursionError:
        logger.debug("parse_json_text: JSON 嵌套过深 (长度=%s)", len(text))
        return Err(
            JsonSyntaxError(
                detail="JSON nesting too deep to decode",
                position=None,
                snippet_preview=_snippet_around(text, None),
            )
        )
    except (TypeError, ValueError) as exc:
        return Err(JsonSyntaxError(detail=str(exc), position=None, snippet_preview=_snippet_around(text, None)))


def repair_with_library(text: str) -> Result:
    """
    使用 json-repair 库做最后一次修复尝试

    库修复结果必须是 JSON 对象才视为成功，否则返回原始语法错误的描述。

    Args:
        text: 清理后仍无法解析的文本

    Returns:
        Ok(解析出的对象) 或 Err(JsonSyntaxError)
    """
    try:
        repaired = repair_json_lib(text, return_objects=False)
    except Exception as exc:
        logger.debug("json-repair库处理失败: %s", exc)
        repaired = ""

    result = parse_json_text(repaired) if repaired else None
    if result is not None and result.is_ok and isinstance(result.value, dict) and result.value:
        logger.info("JSON 解析成功（策略：json-repair库，原始长度=%s，修复后长度=%s）", len(text), len(repaired))
        return result
    return Err(
        JsonSyntaxError(
            detail="json-repair library could not recover a JSON object",
            position=None,
            snippet_preview=_snippet_around(text, None),
        )
    )


class JSONRepairEngine:
    """JSON修复引擎的面向对象封装"""

    def __init__(self, *, preview_chars: int = DiagnosticLimits.PREVIEW_CHARS):
        self.preview_chars = preview_chars

    def extract(self, text: str) -> Result:
        """定位 JSON 对象边界"""
        return extract_json_object(text, preview_chars=self.preview_chars)

    @staticmethod
    def repair(text: str) -> str:
        """修复常见语法瑕疵"""
        return repair_json_syntax(text)

    @staticmethod
    def parse(text: str) -> Result:
        """解析 JSON 文本"""
        return parse_json_text(text)

    def extract_and_parse(self, text: str) -> Result:
        """
        提取、修复并解析

        Returns:
            Ok(解析出的值) 或 Err(BoundaryNotFound | JsonSyntaxError)
        """
        extracted = self.extract(text)
        if extracted.is_err:
            return extracted
        return self.parse(self.repair(extracted.value))


__all__ = [
    "extract_json_object",
    "remove_trailing_commas",
    "repair_json_syntax",
    "parse_json_text",
    "repair_with_library",
    "preview",
    "JSONRepairEngine",
]
