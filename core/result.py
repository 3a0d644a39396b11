"""
管道结果类型

每个阶段都返回 Ok(value) 或 Err(error)，错误以数据形式传递，由调用方决定如何处理。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class AnalysisExtractionError(Exception):
    """在 Err 上调用 unwrap() 时抛出，携带原始错误变体"""

    def __init__(self, error: Any):
        self.error = error
        message = getattr(error, "message", None) or str(error)
        super().__init__(message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise AnalysisExtractionError(self.error)

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok[T], Err[E]]

__all__ = ["Ok", "Err", "Result", "AnalysisExtractionError"]
