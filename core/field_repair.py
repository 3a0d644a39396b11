"""
分析记录的字段修复

确定性、不会失败的规范化：去除所有文本的首尾空白，并把 keyTokens 截断或补齐到固定长度。
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from config.constants import KeyTokenRules, RecordFields
from core.record import AnalysisRecord

logger = logging.getLogger(__name__)


def fit_key_tokens(
    tokens: Sequence[str],
    fallback_tokens: Sequence[str] = KeyTokenRules.DEFAULT_FALLBACKS,
    count: int = KeyTokenRules.COUNT,
) -> list[str]:
    """
    把 keyTokens 调整为恰好 count 个

    超出时保留前 count 个；不足时按当前缺口位置从补齐词表取词，
    词表耗尽后使用 "token N" 占位。

    Args:
        tokens: 已去除空白的关键词
        fallback_tokens: 补齐词表
        count: 目标数量

    Returns:
        新的关键词列表
    """
    fitted = list(tokens[:count])
    if len(tokens) != count:
        logger.warning(
            "keyTokens 数量不符 (期望=%s, 实际=%s)，已自动修复",
            count,
            len(tokens),
        )

    while len(fitted) < count:
        missing_index = len(fitted)
        if missing_index < len(fallback_tokens):
            fitted.append(fallback_tokens[missing_index])
        else:
            fitted.append(KeyTokenRules.placeholder(missing_index))
    return fitted


def repair_fields(
    payload: Mapping[str, Any],
    *,
    fallback_tokens: Sequence[str] = KeyTokenRules.DEFAULT_FALLBACKS,
) -> AnalysisRecord:
    """
    把已通过校验的结构修复为最终记录

    Args:
        payload: validate_payload 的输出
        fallback_tokens: keyTokens 补齐词表

    Returns:
        满足全部不变量的 AnalysisRecord
    """
    repaired: dict[str, Any] = {}

    for name in RecordFields.SCALAR_FIELDS:
        repaired[name] = payload[name].strip()

    for name in RecordFields.LIST_FIELDS:
        repaired[name] = [item.strip() for item in payload[name]]

    repaired[RecordFields.KEY_TOKENS] = fit_key_tokens(
        repaired[RecordFields.KEY_TOKENS],
        [token.strip() for token in fallback_tokens if token.strip()],
    )

    return AnalysisRecord.model_validate(repaired)
