"""镜像管理工具函数"""

from typing import Any, Tuple

from .base import ImageValidationError


def parse_image_name(image_name: str) -> Tuple[str, str]:
    """
    解析镜像名称，分离仓库名和标签

    Args:
        image_name: 镜像名称，格式为 "仓库名:标签"，仓库名可以包含带端口的注册表地址

    Returns:
        Tuple[str, str]: 仓库名和标签
    """
    repository, sep, tag = image_name.rpartition(":")
    # 冒号在最后一个斜杠之前时是注册表端口，不是标签
    if not sep or "/" in tag:
        return image_name, "latest"
    return repository, tag


def require_value(value: Any, field: str) -> str:
    """
    检查必填参数

    Args:
        value: 参数值
        field: 参数名称

    Returns:
        str: 参数值

    Raises:
        ImageValidationError: 参数为None或空字符串时抛出
    """
    if value is None or not str(value).strip():
        raise ImageValidationError(field)
    return str(value)
