"""镜像构建相关功能"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from .base import Operation
from .outcome import classify_events, raise_for_outcome
from .stream import iter_events
from .utils import require_value

if TYPE_CHECKING:
    from ..transport import DaemonTransport


class ImageBuilder:
    """镜像构建器类"""

    def __init__(self, transport: "DaemonTransport", log: Any) -> None:
        """
        初始化镜像构建器

        Args:
            transport: 守护进程传输层
            log: 日志记录器
        """
        self.transport = transport
        self.log = log

    def build(self, build_context: Union[str, Path], tag: str) -> None:
        """
        构建Docker镜像

        Args:
            build_context: 构建上下文目录
            tag: 镜像标签

        Raises:
            ImageValidationError: 参数为空时抛出
            DaemonOperationError: 守护进程报告构建错误时抛出
            DaemonTransportError: 连接失败时抛出
            StreamDecodeError: 构建输出无法解析时抛出
        """
        require_value(build_context, "build_context")
        require_value(tag, "tag")

        self.log.warning(f"开始构建镜像 {tag}...")
        handle = self.transport.open_build_stream(str(build_context), tag)
        outcome = classify_events(iter_events(handle, Operation.BUILD), self.log)
        raise_for_outcome(outcome, Operation.BUILD)
        self.log.success(f"镜像 {tag} 构建成功")
