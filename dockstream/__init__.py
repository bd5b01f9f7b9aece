"""Docker镜像构建、推送工具包"""

# 导入loguru并配置logger
import os

from loguru import logger

from .constants import LOG_LEVEL_ENV_VAR


def _resolve_log_level(name: str) -> str:
    """未知的日志级别回退到INFO"""
    level = (name or "INFO").upper()
    try:
        logger.level(level)
    except ValueError:
        return "INFO"
    return level


# 移除默认处理器
logger.remove()
# 添加标准输出处理器
logger.add(
    sink=lambda msg: print(msg, end=""),  # 使用标准输出
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
    level=_resolve_log_level(os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")),
)

# 导入其他模块
from .cli import app, main
from .managers import ConnectionConfig, ImageManager

__version__ = "0.1.0"

__all__ = [
    "logger",
    "app",
    "main",
    "ConnectionConfig",
    "ImageManager",
]
