# utils/error_handler.py

import json
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """错误严重程度"""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(Enum):
    """提取管道的错误标签"""

    BOUNDARY_NOT_FOUND = "boundary_not_found"
    SYNTAX_ERROR = "syntax_error"
    EXTRACTION_FAILED = "extraction_failed"
    MISSING_FIELDS = "missing_fields"
    INVALID_FIELD_TYPE = "invalid_field_type"
    EMPTY_FIELD = "empty_field"


# ==================== 错误变体 ====================


@dataclass(frozen=True)
class PipelineError:
    """所有错误变体的公共接口：标签、消息和序列化"""

    kind: ClassVar[ErrorKind]

    @property
    def message(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "error",
            "kind": self.kind.value,
            "message": self.message,
            **asdict(self),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class BoundaryNotFound(PipelineError):
    """文本中找不到任何 {…} 片段"""

    kind: ClassVar[ErrorKind] = ErrorKind.BOUNDARY_NOT_FOUND

    original_length: int
    original_preview: str

    @property
    def message(self) -> str:
        return f"No JSON object boundaries found in model response ({self.original_length} chars)"


@dataclass(frozen=True)
class JsonSyntaxError(PipelineError):
    """清理后 JSON 仍无法解析"""

    kind: ClassVar[ErrorKind] = ErrorKind.SYNTAX_ERROR

    detail: str
    position: int | None
    snippet_preview: str

    @property
    def message(self) -> str:
        if self.position is None:
            return self.detail
        return f"{self.detail} (char {self.position})"


@dataclass(frozen=True)
class ExtractionFailed(PipelineError):
    """两次解析尝试都失败后的终止错误"""

    kind: ClassVar[ErrorKind] = ErrorKind.EXTRACTION_FAILED

    original_length: int
    original_preview: str
    cleaned_preview: str
    cause: JsonSyntaxError

    @property
    def message(self) -> str:
        return f"Failed to parse model response: {self.cause.message}"


@dataclass(frozen=True)
class MissingFields(PipelineError):
    """可解析对象中缺少一个或多个必填字段"""

    kind: ClassVar[ErrorKind] = ErrorKind.MISSING_FIELDS

    names: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Missing required fields in model response: {', '.join(self.names)}"


@dataclass(frozen=True)
class InvalidFieldType(PipelineError):
    """字段存在但形状错误"""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_FIELD_TYPE

    field: str
    expected_kind: str

    @property
    def message(self) -> str:
        return f"Field '{self.field}' must be a {self.expected_kind}"


@dataclass(frozen=True)
class EmptyField(PipelineError):
    """必填字符串字段去除空白后为空"""

    kind: ClassVar[ErrorKind] = ErrorKind.EMPTY_FIELD

    field: str

    @property
    def message(self) -> str:
        return f"Field '{self.field}' must be a non-empty string"


# ==================== 友好提示 ====================


class FriendlyError:
    """友好的错误信息"""

    def __init__(
        self,
        kind: ErrorKind,
        title: str,
        message: str,
        suggestions: list[str],
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        recoverable: bool = True,
        technical_details: str | None = None,
    ):
        self.kind = kind
        self.title = title
        self.message = message
        self.suggestions = suggestions
        self.severity = severity
        self.recoverable = recoverable
        self.technical_details = technical_details

    def to_dict(self) -> dict:
        return {
            "type": "error",
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "suggestions": self.suggestions,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "technical_details": self.technical_details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


class ErrorHandler:
    """把错误变体转换为面向用户的友好提示"""

    # 错误模板定义
    ERROR_TEMPLATES = {
        ErrorKind.BOUNDARY_NOT_FOUND: {
            "title": "未找到分析结果",
            "message": "模型返回的内容中没有 JSON 对象",
            "suggestions": [
                "重新请求模型生成分析",
                "检查提示词是否要求只返回 JSON 对象",
            ],
            "severity": ErrorSeverity.WARNING,
            "recoverable": True,
        },
        ErrorKind.SYNTAX_ERROR: {
            "title": "JSON 语法错误",
            "message": "模型返回的 JSON 无法解析",
            "suggestions": ["重新请求模型生成分析"],
            "severity": ErrorSeverity.WARNING,
            "recoverable": True,
        },
        ErrorKind.EXTRACTION_FAILED: {
            "title": "分析结果解析失败",
            "message": "清理格式后模型返回的内容仍然不是合法 JSON",
            "suggestions": [
                "重新请求模型生成分析",
                "如持续失败，可开启 json-repair 库修复",
                "查看日志中的原始文本预览",
            ],
            "severity": ErrorSeverity.ERROR,
            "recoverable": True,
        },
        ErrorKind.MISSING_FIELDS: {
            "title": "分析结果缺少字段",
            "message": "模型返回的对象缺少必填字段",
            "suggestions": [
                "重新请求模型生成分析",
                "检查提示词是否列出了全部字段",
            ],
            "severity": ErrorSeverity.WARNING,
            "recoverable": True,
        },
        ErrorKind.INVALID_FIELD_TYPE: {
            "title": "字段类型错误",
            "message": "模型返回的字段类型不符合预期",
            "suggestions": ["重新请求模型生成分析"],
            "severity": ErrorSeverity.WARNING,
            "recoverable": True,
        },
        ErrorKind.EMPTY_FIELD: {
            "title": "字段为空",
            "message": "模型返回的必填文本字段为空",
            "suggestions": ["重新请求模型生成分析"],
            "severity": ErrorSeverity.WARNING,
            "recoverable": True,
        },
    }

    @classmethod
    def describe(cls, error: PipelineError, context: dict | None = None) -> FriendlyError:
        """处理错误并返回友好的错误信息"""
        template = cls.ERROR_TEMPLATES[error.kind]
        suggestions = list(template["suggestions"])

        if context and context.get("attempt", 0) > 2:
            suggestions.append("已重试多次，建议检查提示词或稍后再试")

        friendly = FriendlyError(
            kind=error.kind,
            title=template["title"],
            message=template["message"],
            suggestions=suggestions,
            severity=template["severity"],
            recoverable=template["recoverable"],
            technical_details=error.message,
        )

        # 记录到日志
        cls._log_error(friendly)

        return friendly

    @classmethod
    def is_recoverable(cls, error: PipelineError) -> bool:
        """重新请求模型是否有可能修正该错误"""
        return bool(cls.ERROR_TEMPLATES[error.kind]["recoverable"])

    @classmethod
    def _log_error(cls, error: FriendlyError):
        """记录错误到日志"""
        log_level = {
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL,
        }.get(error.severity, logging.ERROR)

        logger.log(log_level, json.dumps(error.to_dict(), ensure_ascii=False))


__all__ = [
    "ErrorSeverity",
    "ErrorKind",
    "PipelineError",
    "BoundaryNotFound",
    "JsonSyntaxError",
    "ExtractionFailed",
    "MissingFields",
    "InvalidFieldType",
    "EmptyField",
    "FriendlyError",
    "ErrorHandler",
]
