"""连接配置管理"""

import copy
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type, Union

from loguru import logger

from ..constants import (
    DEFAULT_CONNECTION_SETTINGS,
    DEFAULT_DOCKER_URL,
    ENV_VARS,
    ERROR_MESSAGES,
    PASSWORD_ENV_VAR,
    ConnectionSettings,
)
from .image.base import DockstreamError


class ConfigError(DockstreamError):
    """配置错误"""

    pass


ValidationStructure = Dict[str, Union[Type[Any], "ValidationStructure"]]


def generate_validation_structure(config_template: Mapping[str, Any]) -> ValidationStructure:
    """
    从配置模板生成验证结构

    Args:
        config_template: 配置模板

    Returns:
        ValidationStructure: 验证结构
    """
    validation_structure: ValidationStructure = {}

    for key, value in config_template.items():
        if isinstance(value, dict):
            validation_structure[key] = generate_validation_structure(value)
        elif value is None:
            validation_structure[key] = str
        else:
            validation_structure[key] = type(value)

    return validation_structure


def resolve_url(url: Optional[str]) -> str:
    """未指定地址时使用本地默认地址"""
    if not url:
        logger.info("连接到本地Docker守护进程")
        return DEFAULT_DOCKER_URL
    logger.info(f"连接到 {url}")
    return url


@dataclass(frozen=True)
class ConnectionConfig:
    """Docker守护进程连接配置，创建后不可修改"""

    url: str = DEFAULT_DOCKER_URL
    server_address: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    timeout: Optional[int] = None

    @property
    def auth_config(self) -> Optional[Dict[str, str]]:
        """
        推送时使用的认证信息

        Returns:
            Optional[Dict[str, str]]: docker-py格式的认证信息，未配置用户名时返回None
        """
        if self.username is None:
            return None
        auth = {"username": self.username}
        if self.password is not None:
            auth["password"] = self.password
        if self.email is not None:
            auth["email"] = self.email
        if self.server_address is not None:
            auth["serveraddress"] = self.server_address
        return auth

    def __repr__(self) -> str:
        password = "***" if self.password else None
        return (
            f"ConnectionConfig(url={self.url!r}, server_address={self.server_address!r}, "
            f"username={self.username!r}, password={password!r}, email={self.email!r}, "
            f"timeout={self.timeout!r})"
        )


class ConfigManager:
    """配置管理器类，按 默认值 < 配置文件 < 环境变量 < 显式参数 的优先级合并连接配置"""

    REQUIRED_CONFIG_FIELDS: ValidationStructure

    def __init__(
        self, config_file: Optional[str] = None, env: Optional[Mapping[str, str]] = None
    ) -> None:
        """
        初始化配置管理器

        Args:
            config_file: JSON配置文件路径，可选
            env: 环境变量，默认为os.environ
        """
        self.config_file = config_file
        self.env = os.environ if env is None else env
        self.settings: ConnectionSettings = copy.deepcopy(DEFAULT_CONNECTION_SETTINGS)

        self.REQUIRED_CONFIG_FIELDS = generate_validation_structure(DEFAULT_CONNECTION_SETTINGS)
        self.REQUIRED_CONFIG_FIELDS["docker"]["timeout"] = int

        if config_file:
            self.load_config()
        self._apply_env()

    def load_config(self) -> ConnectionSettings:
        """
        加载配置文件

        Returns:
            ConnectionSettings: 合并后的配置

        Raises:
            ConfigError: 配置加载失败时抛出
        """
        if not self.config_file or not os.path.exists(self.config_file):
            raise ConfigError(ERROR_MESSAGES["config_not_found"].format(self.config_file))

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"读取配置文件失败: {e}") from e

        self.validate_config(config)

        for section, values in config.items():
            self.settings[section].update(values)
        logger.debug(f"已加载配置文件 {self.config_file}")
        return self.settings

    def validate_config(self, config: Any) -> None:
        """
        验证配置的结构

        Raises:
            ConfigError: 配置验证失败时抛出
        """
        if not isinstance(config, dict):
            raise ConfigError(ERROR_MESSAGES["config_validation"].format("配置文件顶层应为对象"))
        try:
            self._validate_config_structure(config, self.REQUIRED_CONFIG_FIELDS)
        except ConfigError as e:
            raise ConfigError(ERROR_MESSAGES["config_validation"].format(e)) from e

    def _validate_config_structure(self, config: Dict[str, Any], required: ValidationStructure) -> None:
        """
        递归验证配置结构，配置文件可以只包含部分配置项

        Args:
            config: 要验证的配置
            required: 配置结构

        Raises:
            ConfigError: 配置结构验证失败时抛出
        """
        for key, value in config.items():
            if key not in required:
                raise ConfigError(f"未知的配置项: {key}")

            value_type = required[key]
            if isinstance(value_type, dict):
                if not isinstance(value, dict):
                    raise ConfigError(f"配置项类型错误: {key} 应为字典")
                self._validate_config_structure(value, value_type)
            elif value is not None and not isinstance(value, value_type):
                raise ConfigError(f"配置项类型错误: {key} 应为 {value_type.__name__}")

    def _apply_env(self) -> None:
        """用环境变量覆盖配置"""
        sections = {"url": "docker", "timeout": "docker"}
        for key, names in ENV_VARS.items():
            for name in names:
                value = self.env.get(name)
                if value:
                    self.settings[sections.get(key, "registry")][key] = value
                    break

        password = self._get_password_from_env(self.settings["registry"]["username"])
        if password:
            self.settings["registry"]["password"] = password

    def _get_password_from_env(self, username: Optional[str]) -> Optional[str]:
        """
        从环境变量获取密码，优先使用 DOCKER_PASSWORD_<用户名>

        Args:
            username: 用户名

        Returns:
            Optional[str]: 从环境变量获取的密码，如果未找到则返回None
        """
        if username:
            password = self.env.get(f"{PASSWORD_ENV_VAR}_{username.upper()}")
            if password:
                logger.debug("已从用户专属环境变量获取密码")
                return password
        return self.env.get(PASSWORD_ENV_VAR)

    def build(self, **overrides: Any) -> ConnectionConfig:
        """
        生成连接配置，值为None的显式参数不会覆盖已有配置

        Args:
            **overrides: url, server_address, username, password, email, timeout

        Returns:
            ConnectionConfig: 不可变的连接配置

        Raises:
            ConfigError: 超时时间不是整数时抛出
        """
        merged: Dict[str, Any] = {**self.settings["docker"], **self.settings["registry"]}
        for key, value in overrides.items():
            if key not in merged:
                raise ConfigError(f"未知的配置项: {key}")
            if value is not None:
                merged[key] = value

        if overrides.get("username") and overrides.get("password") is None:
            password = self.env.get(f"{PASSWORD_ENV_VAR}_{merged['username'].upper()}")
            if password:
                merged["password"] = password

        merged["url"] = resolve_url(merged["url"])
        merged["timeout"] = _parse_timeout(merged["timeout"])
        return ConnectionConfig(**merged)


def _parse_timeout(value: Any) -> Optional[int]:
    if value is None or isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"超时时间应为整数: {value}") from e
