"""Docker镜像管理器模块

该模块包含连接配置、守护进程传输层和镜像管理器。
"""

from .base_manager import BaseManager
from .config_manager import ConfigError, ConfigManager, ConnectionConfig
from .image_manager import ImageManager
from .transport import DaemonTransport, StreamHandle

__all__ = [
    "BaseManager",
    "ConfigError",
    "ConfigManager",
    "ConnectionConfig",
    "DaemonTransport",
    "ImageManager",
    "StreamHandle",
]
