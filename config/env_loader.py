from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .constants import DiagnosticLimits, KeyTokenRules

logger = logging.getLogger(__name__)

# env 文件相对于项目根目录解析，支持从任何目录运行
_CONFIG_DIR = Path(__file__).parent
_PROJECT_ROOT = _CONFIG_DIR.parent
_ENV_FILES = [
    str(_PROJECT_ROOT / ".env"),
    str(_PROJECT_ROOT / ".env.local"),
]


class ExtractionSettings(BaseSettings):
    """提取管道配置（使用 pydantic-settings 自动解析和验证）"""

    model_config = SettingsConfigDict(
        env_prefix="ANALYSIS_",
        env_file=tuple(_ENV_FILES),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 忽略未定义的环境变量
        frozen=True,
    )

    # 错误对象中文本预览的长度上限
    preview_chars: int = Field(default=DiagnosticLimits.PREVIEW_CHARS, ge=0)

    # keyTokens 不足 7 个时的补齐词表，措辞可自由替换
    key_token_fallbacks: Annotated[tuple[str, ...], NoDecode] = KeyTokenRules.DEFAULT_FALLBACKS

    # 清理后仍解析失败时，是否再尝试 json-repair 库
    enable_library_repair: bool = False

    # 调用方重新请求模型时使用的重试参数
    requery_max_attempts: int = Field(default=3, ge=1)
    requery_wait_multiplier: float = Field(default=1.0, ge=0)
    requery_max_wait: float = Field(default=30.0, ge=0)

    # 日志配置
    log_level: str = "INFO"
    console_log_level: str = "WARNING"
    log_file_path: str | None = None

    @field_validator("key_token_fallbacks", mode="before")
    @classmethod
    def parse_fallbacks(cls, v: Any) -> tuple[str, ...]:
        """支持 JSON 数组或逗号分隔的字符串，去除空白项"""
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                v = json.loads(raw)
            else:
                v = raw.split(",")
        if not isinstance(v, (list, tuple)):
            raise ValueError("key_token_fallbacks 必须是字符串列表")
        return tuple(str(item).strip() for item in v if str(item).strip())

    @field_validator("log_level", "console_log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        """日志级别统一为大写"""
        return v.strip().upper()


def load_extraction_settings(**overrides: Any) -> ExtractionSettings:
    """
    加载环境变量，验证它们，并返回 ExtractionSettings 实例。

    Args:
        **overrides: 显式覆盖的字段（优先级高于环境变量）

    Returns:
        配置实例
    """
    try:
        settings = ExtractionSettings(**overrides)
        logger.debug("提取管道配置加载成功。")
        return settings
    except ValidationError as exc:
        logger.critical("配置初始化失败，请检查环境变量设置: %s", exc)
        raise


@lru_cache(maxsize=1)
def get_settings() -> ExtractionSettings:
    """返回进程内共享的只读配置"""
    return load_extraction_settings()


__all__ = ["ExtractionSettings", "load_extraction_settings", "get_settings"]
