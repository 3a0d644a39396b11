"""
分析记录的结构校验

只检查字段是否存在及其基本类型，不修改数据；修复由 field_repair 负责。
"""

import logging
from collections.abc import Mapping
from typing import Any

from config.constants import RecordFields
from core.result import Err, Ok, Result
from utils.error_handler import EmptyField, InvalidFieldType, MissingFields

logger = logging.getLogger(__name__)


def find_missing_fields(payload: Mapping[str, Any]) -> tuple[str, ...]:
    """按声明顺序列出所有缺失的必填字段"""
    return tuple(name for name in RecordFields.REQUIRED_FIELDS if name not in payload)


def is_encodable(text: str) -> bool:
    """JSON 允许 \\ud800 这类孤立代理项转义，但它们无法编码为 UTF-8"""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_payload(payload: Any) -> Result:
    """
    校验解析出的通用结构

    检查顺序：
    1. 所有必填字段都存在（一次报告全部缺失字段）
    2. 列表字段是列表，且元素都是字符串
    3. 文本字段是字符串且去除空白后非空

    Args:
        payload: JSON 解析结果

    Returns:
        Ok(dict) 或 Err(MissingFields | InvalidFieldType | EmptyField)
    """
    if not isinstance(payload, Mapping):
        logger.debug("validate_payload: 顶层不是对象 (%s)", type(payload).__name__)
        return Err(InvalidFieldType(field="record", expected_kind="object"))

    missing = find_missing_fields(payload)
    if missing:
        logger.debug("validate_payload: 缺少字段 %s", ", ".join(missing))
        return Err(MissingFields(names=missing))

    for name in RecordFields.LIST_FIELDS:
        value = payload[name]
        if not isinstance(value, list):
            return Err(InvalidFieldType(field=name, expected_kind="list"))
        if not all(isinstance(item, str) and is_encodable(item) for item in value):
            return Err(InvalidFieldType(field=name, expected_kind="list of strings"))

    for name in RecordFields.SCALAR_FIELDS:
        value = payload[name]
        if not isinstance(value, str) or not is_encodable(value):
            return Err(InvalidFieldType(field=name, expected_kind="string"))
        if not value.strip():
            return Err(EmptyField(field=name))

    return Ok(dict(payload))
