"""
文本规范化和清理模块

在解析之前清理模型返回文本的格式噪声：Markdown 代码块标记、多余的反引号、
Unicode 引号和控制字符。所有函数都是纯函数，不会失败。
"""

import logging
import re

logger = logging.getLogger(__name__)

# 开头的代码块标记，可带 json/JSON 语言标签和换行
LEADING_FENCE_PATTERN = re.compile(r"^```\s*(?:json)?\s*\n?", re.IGNORECASE)
# 结尾的代码块标记
TRAILING_FENCE_PATTERN = re.compile(r"\n?\s*```\s*$")
# 首尾残留的反引号
EDGE_BACKTICKS_PATTERN = re.compile(r"^`+|`+$")

CONTROL_CODEPOINTS: tuple[int, ...] = (*range(0x20), 0x7F)
DEFAULT_ALLOWED_CONTROLS: frozenset[str] = frozenset("\t\n\r")

UNICODE_QUOTE_REPLACEMENTS: dict[str, str] = {
    "“": '"',  # LEFT DOUBLE QUOTATION MARK
    "”": '"',  # RIGHT DOUBLE QUOTATION MARK
    "„": '"',  # DOUBLE LOW-9 QUOTATION MARK
    "‟": '"',  # DOUBLE HIGH-REVERSED-9 QUOTATION MARK
    "‘": "'",  # LEFT SINGLE QUOTATION MARK
    "’": "'",  # RIGHT SINGLE QUOTATION MARK
    "‚": "'",  # SINGLE LOW-9 QUOTATION MARK
    "‛": "'",  # SINGLE HIGH-REVERSED-9 QUOTATION MARK
}


def strip_markdown_fence(text: str) -> str:
    """
    移除Markdown代码块标记

    Args:
        text: 可能包含markdown代码块的文本

    Returns:
        移除代码块标记后的文本
    """
    if not text:
        return ""

    stripped = text.strip()
    stripped = LEADING_FENCE_PATTERN.sub("", stripped, count=1)
    stripped = TRAILING_FENCE_PATTERN.sub("", stripped, count=1)
    return stripped


def strip_edge_backticks(text: str) -> str:
    """移除首尾残留的反引号串"""
    if not text:
        return ""
    return EDGE_BACKTICKS_PATTERN.sub("", text)


def normalize_response_text(text: str) -> str:
    """
    规范化模型返回的原始文本

    依次移除开头和结尾的代码块标记、首尾反引号，最后去除首尾空白。
    最坏情况下返回去除空白后的原文。

    Args:
        text: 模型返回的原始文本

    Returns:
        规范化后的文本
    """
    if not text:
        return ""

    normalized = strip_markdown_fence(text)
    normalized = strip_edge_backticks(normalized.strip())
    normalized = normalized.strip()

    if len(normalized) != len(text):
        logger.debug(
            "normalize_response_text: 移除格式噪声 (%s -> %s)",
            len(text),
            len(normalized),
        )
    return normalized


def normalize_unicode_quotes(text: str) -> str:
    """
    规范化Unicode引号为标准ASCII引号

    Args:
        text: 包含Unicode引号的文本

    Returns:
        规范化后的文本
    """
    if not text:
        return text

    for src, dst in UNICODE_QUOTE_REPLACEMENTS.items():
        if src in text:
            text = text.replace(src, dst)

    return text


def remove_control_characters(text: str, allowed: set[str] | None = None) -> str:
    """
    移除 JSON 中不合法的原始控制字符 (U+0000-U+001F 和 DEL)

    Args:
        text: 候选 JSON 文本
        allowed: 保留的控制字符，默认保留制表符和换行符

    Returns:
        清理后的文本
    """
    if not text:
        return text

    keep = DEFAULT_ALLOWED_CONTROLS if allowed is None else allowed
    table = {codepoint: None for codepoint in CONTROL_CODEPOINTS if chr(codepoint) not in keep}
    cleaned = text.translate(table)

    if len(cleaned) != len(text):
        logger.debug("remove_control_characters: 移除控制字符 %d 个", len(text) - len(cleaned))
    return cleaned


class TextNormalizer:
    """文本规范化器的面向对象封装"""

    @staticmethod
    def strip_markdown(text: str) -> str:
        """移除markdown代码块标记"""
        return strip_markdown_fence(text)

    @staticmethod
    def normalize_quotes(text: str) -> str:
        """规范化Unicode引号"""
        return normalize_unicode_quotes(text)

    @staticmethod
    def remove_control_chars(text: str, allowed: set[str] | None = None) -> str:
        """移除控制字符"""
        return remove_control_characters(text, allowed)

    def normalize(self, text: str) -> str:
        """应用解析前的规范化步骤"""
        return normalize_response_text(text)
