"""镜像推送相关功能"""

from typing import TYPE_CHECKING, Any

from .base import Operation
from .outcome import classify_events, raise_for_outcome
from .stream import iter_events
from .utils import require_value

if TYPE_CHECKING:
    from ..transport import DaemonTransport


class ImagePusher:
    """镜像推送器类"""

    def __init__(self, transport: "DaemonTransport", log: Any) -> None:
        self.transport = transport
        self.log = log

    def push(self, repository: str, tag: str) -> None:
        """
        推送镜像到远程仓库，认证信息在创建连接配置时提供

        Args:
            repository: 镜像仓库
            tag: 镜像标签

        Raises:
            ImageValidationError: 参数为空时抛出
            DaemonOperationError: 守护进程报告推送错误时抛出
            DaemonTransportError: 连接失败时抛出
            StreamDecodeError: 推送输出无法解析时抛出
        """
        require_value(repository, "repository")
        require_value(tag, "tag")

        self.log.warning(f"开始推送镜像 {repository}:{tag}...")
        handle = self.transport.open_push_stream(repository, tag)
        outcome = classify_events(iter_events(handle, Operation.PUSH), self.log)
        if not outcome.ok and outcome.reason and "denied" in outcome.reason.lower():
            self.log.error("访问被拒绝，请检查用户名、密码以及推送权限")
        raise_for_outcome(outcome, Operation.PUSH)
        self.log.success(f"镜像 {repository}:{tag} 推送成功")
