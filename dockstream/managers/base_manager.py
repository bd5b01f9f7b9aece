"""基础管理器类"""

from typing import Any, Optional

from loguru import logger

from .config_manager import ConnectionConfig
from .transport import DaemonTransport


class BaseManager:
    """所有管理器类的基类，持有连接配置、传输层和日志记录器"""

    config: ConnectionConfig
    transport: DaemonTransport

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Optional[DaemonTransport] = None,
        log: Optional[Any] = None,
    ) -> None:
        """
        初始化基础管理器

        Args:
            config: 连接配置
            transport: 传输层，默认根据连接配置创建
            log: 日志记录器，默认使用loguru
        """
        self.config = config
        self.log = log if log is not None else logger.bind(component=type(self).__name__)
        self.transport = transport if transport is not None else DaemonTransport(config)
        self.log.debug(f"已创建管理器: {config!r}")

    def _check_docker_connection(self) -> bool:
        """
        检查Docker守护进程连接状态

        Returns:
            bool: 连接是否正常
        """
        try:
            self.transport.api.ping()
            return True
        except Exception as e:
            self.log.error(f"Docker连接检查失败: {e}")
            return False
