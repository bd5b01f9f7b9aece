"""Docker镜像操作相关功能模块

该子包包含镜像操作相关的各个功能模块，如事件流解析、结果判定、构建、推送、标签管理等。
"""

from .base import (
    DaemonOperationError,
    DaemonTransportError,
    DockstreamError,
    FailureKind,
    ImageOperationError,
    ImageValidationError,
    Operation,
    Outcome,
    StreamDecodeError,
    StreamEvent,
)
from .build import ImageBuilder
from .outcome import classify_events, raise_for_outcome
from .push import ImagePusher
from .stream import EventStream, iter_events
from .tag import ImageTagger
from .utils import parse_image_name, require_value

__all__ = [
    "DaemonOperationError",
    "DaemonTransportError",
    "DockstreamError",
    "FailureKind",
    "ImageOperationError",
    "ImageValidationError",
    "Operation",
    "Outcome",
    "StreamDecodeError",
    "StreamEvent",
    "ImageBuilder",
    "ImagePusher",
    "ImageTagger",
    "classify_events",
    "raise_for_outcome",
    "EventStream",
    "iter_events",
    "parse_image_name",
    "require_value",
]
