"""镜像操作基础类型定义"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ...constants import ERROR_MESSAGES


class DockstreamError(Exception):
    """所有dockstream异常的基类"""
    pass


class ImageValidationError(DockstreamError, ValueError):
    """参数校验错误，在任何网络调用之前抛出"""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or ERROR_MESSAGES["field_empty"].format(field))


class StreamDecodeError(DockstreamError):
    """守护进程返回的事件流无法解析"""

    def __init__(self, message: str, line: Optional[str] = None) -> None:
        self.line = line
        super().__init__(message)


class ImageOperationError(DockstreamError):
    """镜像操作失败"""

    def __init__(self, operation: "Operation", reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation.label}失败: {reason}")


class DaemonOperationError(ImageOperationError):
    """守护进程在事件流中报告了错误"""
    pass


class DaemonTransportError(ImageOperationError):
    """与守护进程的连接或读取失败"""
    pass


class Operation(Enum):
    """镜像操作类型"""

    BUILD = "build"
    PUSH = "push"
    TAG = "tag"

    @property
    def label(self) -> str:
        return {"build": "构建镜像", "push": "推送镜像", "tag": "添加标签"}[self.value]


class FailureKind(Enum):
    """失败来源"""

    DAEMON = "daemon"
    TRANSPORT = "transport"
    DECODE = "decode"


@dataclass(frozen=True)
class StreamEvent:
    """守护进程事件流中的一条事件"""

    message: Optional[str] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return bool(self.error)

    @property
    def reason(self) -> str:
        """
        错误原因，由error和errorDetail组合而成

        Returns:
            str: 形如 "unauthorized: 401" 的错误描述
        """
        if self.error_detail and self.error_detail != self.error:
            return f"{self.error}: {self.error_detail}"
        return self.error or ""

    @classmethod
    def from_frame(cls, frame: Dict[str, Any]) -> "StreamEvent":
        """
        从守护进程返回的JSON对象创建事件

        构建输出位于stream字段，推送进度位于status字段（可能带有层id），
        错误位于error和errorDetail字段。只包含aux等字段的对象视为空事件。

        Args:
            frame: 解析后的JSON对象

        Returns:
            StreamEvent: 事件
        """
        error = frame.get("error")
        if error:
            return cls(error=str(error), error_detail=_detail_text(frame.get("errorDetail")))

        text = frame.get("stream")
        if text is None and frame.get("status") is not None:
            text = str(frame["status"])
            if frame.get("id"):
                text = f"{frame['id']}: {text}"
        if text is None:
            return cls()

        message = str(text).rstrip()
        return cls(message=message or None)


def _detail_text(detail: Any) -> Optional[str]:
    # errorDetail通常是 {"code": 401, "message": "..."}
    if detail is None:
        return None
    if isinstance(detail, dict):
        value = detail.get("message") or detail.get("code")
        return str(value) if value is not None else None
    return str(detail) or None


@dataclass(frozen=True)
class Outcome:
    """流式操作的最终结果"""

    failure_kind: Optional[FailureKind] = None
    reason: Optional[str] = None
    # 中断事件流的原始异常，解析失败和连接中断时保留
    fault: Optional[DockstreamError] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.failure_kind is None

    @classmethod
    def success(cls) -> "Outcome":
        return cls()

    @classmethod
    def failure(
        cls, reason: str, kind: FailureKind = FailureKind.DAEMON, fault: Optional[DockstreamError] = None
    ) -> "Outcome":
        return cls(failure_kind=kind, reason=reason, fault=fault)
