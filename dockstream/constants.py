"""常量配置模块"""

from typing import Optional, TypedDict

# Docker守护进程默认地址
DEFAULT_DOCKER_URL: str = "http://localhost:2375"

# 默认配置文件
DEFAULT_CONFIG_FILE: str = "dockstream.json"


class DockerSettings(TypedDict):
    url: Optional[str]
    timeout: Optional[int]


class RegistrySettings(TypedDict):
    server_address: Optional[str]
    username: Optional[str]
    password: Optional[str]
    email: Optional[str]


class ConnectionSettings(TypedDict):
    docker: DockerSettings
    registry: RegistrySettings


DEFAULT_CONNECTION_SETTINGS: ConnectionSettings = {
    "docker": {"url": None, "timeout": None},  # None表示使用默认地址和docker默认超时
    "registry": {
        "server_address": None,
        "username": None,
        "password": None,
        "email": None,
    },
}

# 环境变量
ENV_VARS = {
    "url": ("DOCKER_URL", "DOCKER_HOST"),
    "timeout": ("DOCKER_TIMEOUT",),
    "server_address": ("DOCKER_REGISTRY",),
    "username": ("DOCKER_USERNAME",),
    "email": ("DOCKER_EMAIL",),
}
PASSWORD_ENV_VAR: str = "DOCKER_PASSWORD"
LOG_LEVEL_ENV_VAR: str = "DOCKSTREAM_LOG_LEVEL"

# 错误消息
ERROR_MESSAGES = {
    "field_empty": "参数 {} 不能为空",
    "docker_connection": "无法连接到Docker守护进程: {}",
    "config_not_found": "配置文件不存在: {}",
    "config_validation": "配置验证失败: {}",
}
